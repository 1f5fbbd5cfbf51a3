from django.urls import path
from . import views

urlpatterns = [
    path('list/', views.job_list, name='job_list'),
    path('search/', views.job_search, name='job_search'),
    path('detail/', views.job_detail, name='job_detail'),
    path('categories/', views.categories, name='job_categories'),
    path('stats/', views.job_stats, name='job_stats'),
    path('add/', views.add_job, name='add_job'),
    path('update/', views.update_job, name='update_job'),
    path('delete/', views.delete_job, name='delete_job'),
]
