from django.urls import path

from .views import list_create_view
from .views import retrieve_update_destroy_view
from .views import status_update_view

urlpatterns = [
    # GET and POST (List with filters and Create new task)
    path('tasks', list_create_view, name="task-list-create"),

    # GET, PUT, DELETE (Detail and Manipulation)
    path('tasks/<int:pk>', retrieve_update_destroy_view, name="task-detail"),

    # PATCH (status only)
    path('tasks/<int:pk>/status', status_update_view, name="task-status"),
]
