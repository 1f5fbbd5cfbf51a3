from django.urls import path
from . import views

urlpatterns = [
    path('submit/', views.submit_application, name='submit_application'),
    path('update-status/', views.update_status, name='update_application_status'),
    path('detail/', views.application_detail, name='application_detail'),
    path('list/', views.application_list, name='application_list'),
    path('job/', views.job_applications, name='job_applications'),
    path('mine/', views.my_applications, name='my_applications'),
    path('stats/', views.application_stats, name='application_stats'),
    path('document/<str:category>/<str:name>/', views.download_document, name='download_document'),
]
