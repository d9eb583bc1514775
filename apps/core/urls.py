from django.urls import path

from rest_framework_simplejwt.views import TokenRefreshView

from . import views

app_name = "core"

urlpatterns = [
    path("health/", views.health_check, name="health_check"),
    # Authentication endpoints
    path("api/auth/register/", views.UserRegistrationView.as_view(), name="register"),
    path("api/auth/login/", views.CustomTokenObtainPairView.as_view(), name="token_obtain_pair"),
    path("api/auth/refresh/", TokenRefreshView.as_view(), name="token_refresh"),
    # User endpoints
    path("api/user/profile/", views.UserProfileView.as_view(), name="user_profile"),
    path("api/users/", views.UserListView.as_view(), name="user_list"),
    path("api/users/<int:id>/role/", views.UserRoleUpdateView.as_view(), name="user_role_update"),
]
