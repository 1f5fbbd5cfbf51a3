from django.contrib import admin
from django.urls import path, include

# Uploaded documents are served only through the admin-only document endpoint.
urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/accounts/', include('accounts.urls')),
    path('api/jobs/', include('jobs.urls')),
    path('api/applications/', include('applications.urls')),
]
