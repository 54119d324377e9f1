"""
URL mappings for the clinic records API.

Paths match the browser client exactly; trailing slashes are deliberately
omitted.
"""
from django.urls import path

from .auth_views import login_view, signup_view
from .views import health
from .views.patients import delete_account, list_patients, patient_info, update_patient

urlpatterns = [
    path('healthz', health.healthz, name='healthz'),
    # Authentication
    path('api/login', login_view, name='login_view'),
    path('api/signup', signup_view, name='signup_view'),
    # Doctor
    path('api/delete-account', delete_account, name='delete_account'),
    path('api/patients', list_patients, name='list_patients'),
    path('api/update-patient', update_patient, name='update_patient'),
    # Patient
    path('api/patient-info', patient_info, name='patient_info'),
]
