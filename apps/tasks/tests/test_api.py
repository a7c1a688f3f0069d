"""
Integration tests for task and category endpoints.
Covers the session guard, ownership isolation and the add/toggle/delete
flow for both the home scope and the category scope.
"""
from unittest import mock
from uuid import uuid4
from django.db import DatabaseError
from django.test import TestCase, Client

from apps.identity.jwt_auth import create_access_token
from apps.identity.models import User
from apps.tasks.models import Category, Task


def make_user(username=None):
    username = username or f"user_{uuid4().hex[:8]}"
    return User.objects.create_user(username=username, password="testpass123")


def client_for(user):
    """A test client carrying the user's access-token cookie."""
    client = Client()
    client.cookies['access_token'] = create_access_token(user.id)
    return client


class SessionGuardTest(TestCase):

    def setUp(self):
        self.client = Client()

    def test_page_loads_redirect_to_landing(self):
        for url in ['/api/tasks/', '/api/categories/', f'/api/categories/{uuid4()}']:
            response = self.client.get(url)
            self.assertEqual(response.status_code, 303, url)
            self.assertEqual(response['Location'], '/')

    def test_actions_return_401(self):
        category_id = uuid4()
        for url in [
            '/api/tasks/add', '/api/tasks/toggle', '/api/tasks/delete',
            '/api/categories/add', '/api/categories/delete',
            f'/api/categories/{category_id}/add',
        ]:
            response = self.client.post(url, {'content': 'x', 'id': str(uuid4()), 'name': 'x'})
            self.assertEqual(response.status_code, 401, url)
            self.assertEqual(response.json(), {'error': 'Authentication required'})
        self.assertEqual(Task.objects.count(), 0)

    def test_invalid_token_treated_as_no_session(self):
        self.client.cookies['access_token'] = 'garbage'
        self.assertEqual(self.client.get('/api/tasks/').status_code, 303)


class HomeTaskFlowTest(TestCase):

    def setUp(self):
        self.user = make_user('alice')
        self.client = client_for(self.user)

    def tasks(self):
        response = self.client.get('/api/tasks/')
        self.assertEqual(response.status_code, 200)
        return response.json()['tasks']

    def test_full_lifecycle(self):
        """add -> duplicate -> toggle -> delete -> not found."""
        response = self.client.post('/api/tasks/add', {'content': 'Buy milk'})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {'success': True})

        tasks = self.tasks()
        self.assertEqual(len(tasks), 1)
        self.assertEqual(tasks[0]['task_name'], 'Buy milk')
        self.assertFalse(tasks[0]['completed'])
        self.assertEqual(tasks[0]['user_id'], str(self.user.id))
        self.assertIsNone(tasks[0]['category_id'])
        task_id = tasks[0]['task_id']

        response = self.client.post('/api/tasks/add', {'content': 'buy milk'})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {'error': 'Task already exists'})

        response = self.client.post('/api/tasks/toggle', {'id': task_id})
        self.assertEqual(response.status_code, 200)
        self.assertTrue(self.tasks()[0]['completed'])

        response = self.client.post('/api/tasks/delete', {'id': task_id})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(self.tasks(), [])

        for action in ['toggle', 'delete']:
            response = self.client.post(f'/api/tasks/{action}', {'id': task_id})
            self.assertEqual(response.status_code, 404)
            self.assertEqual(response.json(), {'error': 'Task not found or unauthorized'})

    def test_blank_content(self):
        response = self.client.post('/api/tasks/add', {'content': '   '})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {'error': 'Missing task content'})
        response = self.client.post('/api/tasks/add', {})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(Task.objects.count(), 0)

    def test_missing_task_id(self):
        for action in ['toggle', 'delete']:
            response = self.client.post(f'/api/tasks/{action}', {})
            self.assertEqual(response.status_code, 400)
            self.assertEqual(response.json(), {'error': 'Missing task ID'})

    def test_toggle_twice(self):
        task = Task.objects.create(user_id=self.user.id, task_name='Read')
        self.client.post('/api/tasks/toggle', {'id': str(task.id)})
        self.client.post('/api/tasks/toggle', {'id': str(task.id)})
        task.refresh_from_db()
        self.assertFalse(task.completed)


class OwnershipIsolationTest(TestCase):

    def setUp(self):
        self.alice = make_user('alice')
        self.bob = make_user('bob')
        self.alice_client = client_for(self.alice)
        self.bob_client = client_for(self.bob)

        self.category = Category.objects.create(user_id=self.alice.id, name='Work')
        self.task = Task.objects.create(user_id=self.alice.id, task_name='Secret', category=self.category)

    def test_list_hides_foreign_tasks(self):
        self.assertEqual(self.bob_client.get('/api/tasks/').json()['tasks'], [])
        self.assertEqual(self.bob_client.get('/api/categories/').json()['categories'], [])

    def test_known_id_cannot_be_toggled_or_deleted(self):
        for action in ['toggle', 'delete']:
            response = self.bob_client.post(f'/api/tasks/{action}', {'id': str(self.task.id)})
            self.assertEqual(response.status_code, 404)
        self.task.refresh_from_db()
        self.assertFalse(self.task.completed)

    def test_foreign_category_page_redirects(self):
        response = self.bob_client.get(f'/api/categories/{self.category.id}')
        self.assertEqual(response.status_code, 303)

    def test_foreign_category_actions_look_missing(self):
        for action, data in [
            ('add', {'content': 'Intrude'}),
            ('toggle', {'id': str(self.task.id)}),
            ('delete', {'id': str(self.task.id)}),
        ]:
            response = self.bob_client.post(f'/api/categories/{self.category.id}/{action}', data)
            self.assertEqual(response.status_code, 404)
            self.assertEqual(response.json(), {'error': 'Category not found or unauthorized'})

        response = self.bob_client.post('/api/categories/delete', {'id': str(self.category.id)})
        self.assertEqual(response.status_code, 404)

        self.assertEqual(Task.objects.count(), 1)
        self.assertTrue(Category.objects.filter(id=self.category.id).exists())


class CategoryScopeTest(TestCase):

    def setUp(self):
        self.user = make_user('alice')
        self.client = client_for(self.user)

    def create_category(self, name):
        response = self.client.post('/api/categories/add', {'name': name})
        self.assertEqual(response.status_code, 200)
        return Category.objects.get(user_id=self.user.id, name=name)

    def test_category_page(self):
        work = self.create_category('Work')
        self.client.post(f'/api/categories/{work.id}/add', {'content': 'Report'})
        self.client.post('/api/tasks/add', {'content': 'Buy milk'})

        response = self.client.get(f'/api/categories/{work.id}')
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body['category']['name'], 'Work')
        self.assertEqual(body['category']['category_id'], str(work.id))
        self.assertEqual([t['task_name'] for t in body['tasks']], ['Report'])
        self.assertEqual(body['tasks'][0]['category_id'], str(work.id))

    def test_unknown_category_page_redirects(self):
        self.assertEqual(self.client.get('/api/categories/not-a-uuid').status_code, 303)

    def test_duplicate_category(self):
        self.create_category('Work')
        response = self.client.post('/api/categories/add', {'name': 'work'})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {'error': 'Category already exists'})

    def test_toggle_and_delete_within_category(self):
        work = self.create_category('Work')
        home = self.create_category('Home')
        task = Task.objects.create(user_id=self.user.id, task_name='Report', category=work)

        # Filed elsewhere: the home category cannot reach it
        response = self.client.post(f'/api/categories/{home.id}/toggle', {'id': str(task.id)})
        self.assertEqual(response.status_code, 404)

        response = self.client.post(f'/api/categories/{work.id}/toggle', {'id': str(task.id)})
        self.assertEqual(response.status_code, 200)
        task.refresh_from_db()
        self.assertTrue(task.completed)

        response = self.client.post(f'/api/categories/{work.id}/delete', {'id': str(task.id)})
        self.assertEqual(response.status_code, 200)
        self.assertFalse(Task.objects.filter(id=task.id).exists())

    def test_delete_category(self):
        work = self.create_category('Work')
        response = self.client.post('/api/categories/delete', {'id': str(work.id)})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(self.client.get('/api/categories/').json()['categories'], [])

        response = self.client.post('/api/categories/delete', {})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {'error': 'Missing category ID'})


class BackendFailureTest(TestCase):

    def setUp(self):
        self.user = make_user('alice')
        self.client = client_for(self.user)

    def test_page_load_degrades_to_empty_list(self):
        Task.objects.create(user_id=self.user.id, task_name='Buy milk')
        with mock.patch.object(Task.objects, 'filter', side_effect=DatabaseError("down")):
            response = self.client.get('/api/tasks/')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {'tasks': [], 'error': 'Failed to load tasks'})

    def test_insert_failure_is_tagged_500(self):
        with mock.patch.object(Task.objects, 'create', side_effect=DatabaseError("down")):
            response = self.client.post('/api/tasks/add', {'content': 'Buy milk'})
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {'error': 'Failed to add task'})

    def test_delete_failure_is_tagged_500(self):
        task = Task.objects.create(user_id=self.user.id, task_name='Buy milk')
        with mock.patch.object(Task, 'delete', side_effect=DatabaseError("down")):
            response = self.client.post('/api/tasks/delete', {'id': str(task.id)})
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {'error': 'Failed to delete task'})
        self.assertTrue(Task.objects.filter(id=task.id).exists())

    def test_category_page_degrades_to_empty_list(self):
        work = Category.objects.create(user_id=self.user.id, name='Work')
        Task.objects.create(user_id=self.user.id, task_name='Report', category=work)
        with mock.patch.object(Task.objects, 'filter', side_effect=DatabaseError("down")):
            response = self.client.get(f'/api/categories/{work.id}')
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body['category']['name'], 'Work')
        self.assertEqual(body['tasks'], [])
        self.assertEqual(body['error'], 'Failed to load tasks')

    def test_categories_page_degrades_to_empty_list(self):
        Category.objects.create(user_id=self.user.id, name='Work')
        with mock.patch.object(Category.objects, 'filter', side_effect=DatabaseError("down")):
            response = self.client.get('/api/categories/')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {'categories': [], 'error': 'Failed to load categories'})

    def test_overlong_content_is_tagged_400(self):
        response = self.client.post('/api/tasks/add', {'content': 'x' * 256})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {'error': 'Task content exceeds 255 characters'})
        self.assertEqual(Task.objects.count(), 0)
