# config/urls.py

from django.contrib import admin
from django.urls import path, include

urlpatterns = [
    # Admin
    path('admin/', admin.site.urls),

    # API JSON do board
    path('api/workspace/', include('apps.board.urls')),
]

# Customizar títulos do admin
admin.site.site_header = 'Colab Board Admin'
admin.site.site_title = 'Colab Board'
admin.site.index_title = 'Administração dos boards'
