# urls.py
from rest_framework.routers import DefaultRouter
from .views import RestoTableViewSet

router = DefaultRouter()
router.register('tables', RestoTableViewSet)

urlpatterns = router.urls
