"""
View-state controllers.

- task_list.py: TaskListController (list screen)
- task_detail.py: TaskDetailController (detail / editor screen)
"""
