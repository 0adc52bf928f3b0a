from django.urls import path

from liturgy.ui import views

urlpatterns = [
    # Escala publicada
    path("", views.month_view, name="index"),
    path("status/", views.status_view, name="status"),

    # Modo administrador
    path("login/", views.login_view, name="login"),
    path("logout/", views.logout_view, name="logout"),
]
