from django.core.management.base import BaseCommand
from apps.identity.models import User
from apps.tasks.models import Category, Task

DEMO_TASKS = {
    None: ['Buy milk', 'Call the bank'],
    'Work': ['Review pull requests', 'Write weekly report'],
    'Home': ['Water the plants'],
}


class Command(BaseCommand):
    help = 'Seeds a demo account with categories and tasks'

    def add_arguments(self, parser):
        parser.add_argument('--username', default='demo')
        parser.add_argument('--password', default='demo-password')

    def handle(self, *args, **options):
        user, created = User.objects.get_or_create(username=options['username'])
        if created:
            user.set_password(options['password'])
            user.save()
            self.stdout.write(self.style.SUCCESS(f'Created user: {user.username}'))
        else:
            self.stdout.write(self.style.WARNING(f'Using existing user: {user.username}'))

        for category_name, task_names in DEMO_TASKS.items():
            category = None
            if category_name:
                category, _ = Category.objects.get_or_create(user_id=user.id, name=category_name)

            for task_name in task_names:
                _, task_created = Task.objects.get_or_create(
                    user_id=user.id,
                    category=category,
                    task_name=task_name,
                )
                if task_created:
                    self.stdout.write(f'  + {category_name or "(no category)"}: {task_name}')
