from django.urls import path
from .views import access_list, access_grant, access_revoke, access_check, access_users

urlpatterns = [
    path('access/', access_list, name='access-list'),
    path('access/grant/', access_grant, name='access-grant'),
    path('access/revoke/', access_revoke, name='access-revoke'),
    path('access/check/', access_check, name='access-check'),
    path('access/users/', access_users, name='access-users'),
]
