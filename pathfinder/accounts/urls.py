from django.urls import path
from . import views

urlpatterns = [
    path("register/", views.register, name="register"),
    path("login/", views.user_login, name="login"),
    path("admin-login/", views.admin_login, name="admin_login"),
    path("logout/", views.user_logout, name="logout"),
    path("session/", views.session_status, name="session_status"),
    path("profile/", views.profile, name="profile"),
]
