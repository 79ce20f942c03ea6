# tasks/views.py

import logging

from rest_framework import generics, status

from api.envelope import success_response
from api.exceptions import NotFound, ValidationError

from .models import Task
from .query import FilterSpec, TaskQueryEngine
from .serializers import TaskSerializer, TaskStatusSerializer

logger = logging.getLogger(__name__)


class TaskLookupMixin:
    """Resolve ``pk`` to a Task or raise the taxonomy NotFound."""

    def get_object(self):
        try:
            return Task.objects.get(pk=self.kwargs['pk'])
        except Task.DoesNotExist:
            raise NotFound("Task not found")


class TaskListCreateView(generics.ListCreateAPIView):
    """
    GET: List tasks, filtered by status / priority / category and sorted by
         sortBy / sortOrder (default createdAt desc).
    POST: Create a new task.
    """
    serializer_class = TaskSerializer
    queryset = Task.objects.all()

    def list(self, request, *args, **kwargs):
        spec = FilterSpec.from_query_params(request.query_params)
        tasks = TaskQueryEngine(self.get_queryset()).list(spec)
        serializer = self.get_serializer(tasks, many=True)
        return success_response(serializer.data, count=len(tasks))

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        task = serializer.save()
        logger.info(f"Task {task.pk} created")
        return success_response(
            serializer.data,
            message="Task created successfully",
            status=status.HTTP_201_CREATED,
        )

list_create_view = TaskListCreateView.as_view()


class TaskRetrieveUpdateDestroyView(TaskLookupMixin, generics.RetrieveUpdateDestroyAPIView):
    """
    GET, PUT, DELETE for a specific task instance.
    PUT updates only the fields present in the body.
    """
    serializer_class = TaskSerializer
    queryset = Task.objects.all()
    http_method_names = ['get', 'put', 'delete', 'options']

    def retrieve(self, request, *args, **kwargs):
        serializer = self.get_serializer(self.get_object())
        return success_response(serializer.data)

    def update(self, request, *args, **kwargs):
        task = self.get_object()
        serializer = self.get_serializer(task, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        logger.info(f"Task {task.pk} updated")
        return success_response(serializer.data, message="Task updated successfully")

    def destroy(self, request, *args, **kwargs):
        task = self.get_object()
        pk = task.pk
        task.delete()
        logger.info(f"Task {pk} deleted")
        return success_response({'id': pk}, message="Task deleted successfully")

retrieve_update_destroy_view = TaskRetrieveUpdateDestroyView.as_view()


class TaskStatusUpdateView(TaskLookupMixin, generics.GenericAPIView):
    """
    PATCH: Update only the status of a task. The stored task is untouched
    unless the new status is one of the four allowed values.
    """
    serializer_class = TaskStatusSerializer
    queryset = Task.objects.all()

    def patch(self, request, *args, **kwargs):
        task = self.get_object()
        serializer = self.get_serializer(data=request.data)
        if not serializer.is_valid():
            raise ValidationError("Valid status is required", details=serializer.errors)

        task.status = serializer.validated_data['status']
        task.save(update_fields=['status', 'updated_at'])
        logger.info(f"Task {task.pk} status set to {task.status}")
        return success_response(
            TaskSerializer(task).data,
            message="Task status updated successfully",
        )

status_update_view = TaskStatusUpdateView.as_view()
