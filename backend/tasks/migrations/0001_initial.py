import django.core.validators
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
    ]

    operations = [
        migrations.CreateModel(
            name='Task',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('title', models.CharField(max_length=100, verbose_name='title')),
                ('description', models.CharField(blank=True, default='', max_length=500, verbose_name='description')),
                ('priority', models.CharField(choices=[('low', 'Low'), ('medium', 'Medium'), ('high', 'High'), ('urgent', 'Urgent')], default='medium', max_length=10, verbose_name='priority')),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('in-progress', 'In progress'), ('completed', 'Completed'), ('cancelled', 'Cancelled')], default='pending', max_length=12, verbose_name='status')),
                ('category', models.CharField(blank=True, default='', max_length=50, verbose_name='category')),
                ('due_date', models.DateField(blank=True, help_text='The deadline for the task.', null=True, verbose_name='due date')),
                ('estimated_duration', models.PositiveIntegerField(blank=True, help_text='Estimated time to complete, in minutes.', null=True, validators=[django.core.validators.MinValueValidator(1)], verbose_name='estimated duration')),
                ('tags', models.JSONField(blank=True, default=list, verbose_name='tags')),
                ('ai_suggestions', models.TextField(blank=True, null=True, verbose_name='AI suggestions')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='created at')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='updated at')),
            ],
            options={
                'verbose_name': 'Task',
                'verbose_name_plural': 'Tasks',
                'ordering': ['-created_at', 'id'],
            },
        ),
    ]
