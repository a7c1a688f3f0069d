"""
URL configuration for Taskboard.
"""
from django.contrib import admin
from django.urls import path
from ninja import NinjaAPI

api = NinjaAPI(
    title="Taskboard API",
    version="1.0.0",
    description="Personal task board: categories and tasks owned by the signed-in user",
    docs_url="/docs",
)

from apps.identity.api import router as identity_router
from apps.tasks.api import home_router, category_router

api.add_router("/identity/", identity_router)
api.add_router("/tasks/", home_router)
api.add_router("/categories/", category_router)

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/', api.urls),
]
