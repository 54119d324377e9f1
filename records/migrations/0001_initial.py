import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='User',
            fields=[
                ('id', models.CharField(help_text="Login identifier, unique across all roles (e.g. 'P001')", max_length=64, primary_key=True, serialize=False)),
                ('role', models.CharField(choices=[('doctor', 'Doctor'), ('patient', 'Patient')], db_index=True, max_length=10)),
                ('password_hash', models.CharField(max_length=128)),
                ('name', models.CharField(max_length=255)),
                ('medical_info', models.TextField(default='no medical information')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
            ],
            options={
                'ordering': ['id'],
            },
        ),
        migrations.CreateModel(
            name='Notification',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('message', models.TextField()),
                ('timestamp', models.DateTimeField(default=django.utils.timezone.now)),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='notifications', to='records.user')),
            ],
            options={
                'ordering': ['timestamp', 'id'],
            },
        ),
    ]
