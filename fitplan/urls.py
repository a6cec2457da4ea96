from django.urls import path
from .views import FitnessPlanView

urlpatterns = [
    path("fitness-plan/", FitnessPlanView.as_view(), name="fitness-plan"),
]
