from django.urls import path, include

from .views import health_view

urlpatterns = [
    path('health', health_view, name='health'),
    path('', include('tasks.urls')),
    path('', include('assistant.urls')),
]
