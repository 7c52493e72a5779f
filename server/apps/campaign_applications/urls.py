"""URL routes for campaign applications."""

from django.urls import path

from server.apps.campaign_applications import views

app_name = 'campaign_applications'

urlpatterns = [
    path('create', views.create, name='create'),
    path(
        'uploadFile/<uuid:application_id>',
        views.upload_file,
        name='upload_file',
    ),
    path('list', views.list_all, name='list'),
    path('byId/<uuid:application_id>', views.by_id, name='by_id'),
    path('fileById/<uuid:file_id>', views.file_by_id, name='file_by_id'),
    path('<uuid:application_id>', views.update, name='update'),
]
