# records/management/commands/seed_records.py
from django.conf import settings
from django.core.management.base import BaseCommand

from records.hashers import hash_password
from records.models import Notification, Role, User

DEMO_PATIENT = {
    "id": "P001",
    "password": "123456",
    "name": "Mohamed Ali",
    "medical_info": "Stable condition",
    "welcome": "Welcome!",
}


class Command(BaseCommand):
    help = "Ensure the doctor account and a demo patient exist (idempotent)."

    def add_arguments(self, parser):
        parser.add_argument("--no-demo", action="store_true", help="Only ensure the doctor account.")

    def handle(self, *args, **opts):
        if User.objects.filter(role=Role.DOCTOR).exists():
            self.stdout.write("doctor account already present")
        else:
            User.objects.create(
                id=settings.SEED_DOCTOR_ID,
                role=Role.DOCTOR,
                password_hash=hash_password(settings.SEED_DOCTOR_PASSWORD),
                name=settings.SEED_DOCTOR_NAME,
            )
            self.stdout.write(self.style.SUCCESS(f"ok: {settings.SEED_DOCTOR_ID} (doctor)"))

        if opts["no_demo"]:
            return
        if User.objects.filter(id=DEMO_PATIENT["id"]).exists():
            self.stdout.write(f"{DEMO_PATIENT['id']} already present")
            return
        patient = User.objects.create(
            id=DEMO_PATIENT["id"],
            role=Role.PATIENT,
            password_hash=hash_password(DEMO_PATIENT["password"]),
            name=DEMO_PATIENT["name"],
            medical_info=DEMO_PATIENT["medical_info"],
        )
        Notification.objects.create(user=patient, message=DEMO_PATIENT["welcome"])
        self.stdout.write(self.style.SUCCESS(f"ok: {patient.id} (patient)"))
