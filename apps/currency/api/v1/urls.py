from django.urls import path, include
from rest_framework.routers import DefaultRouter

from apps.currency.api.v1.views import CurrencyViewSet

router = DefaultRouter()
router.register(r'currencies', CurrencyViewSet, basename='currency')

urlpatterns = [
    path('', include(router.urls)),
]
