import uuid

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('people', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='CampaignApplication',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('organizer_name', models.CharField(max_length=200)),
                ('organizer_email', models.EmailField(blank=True, max_length=254)),
                ('organizer_phone', models.CharField(blank=True, max_length=50)),
                ('beneficiary', models.CharField(max_length=200)),
                ('organizer_beneficiary_relation', models.CharField(blank=True, max_length=200)),
                ('campaign_name', models.CharField(max_length=200)),
                ('goal', models.TextField()),
                ('history', models.TextField(blank=True)),
                ('amount', models.CharField(max_length=200)),
                ('description', models.TextField(blank=True)),
                ('campaign_guarantee', models.TextField(blank=True)),
                ('other_finance_sources', models.TextField(blank=True)),
                ('other_notes', models.TextField(blank=True)),
                ('category', models.CharField(choices=[('medical', 'Medical'), ('charity', 'Charity'), ('disasters', 'Disasters'), ('education', 'Education'), ('animals', 'Animals'), ('nature', 'Nature'), ('sport', 'Sport'), ('art', 'Art'), ('others', 'Others')], default='others', max_length=20)),
                ('campaign_end', models.CharField(choices=[('funds', 'When the goal is reached'), ('date', 'On a date'), ('never', 'Never')], default='funds', max_length=20)),
                ('campaign_end_date', models.DateField(blank=True, null=True)),
                ('accept_terms_and_conditions', models.BooleanField(default=False)),
                ('transparency_terms_accepted', models.BooleanField(default=False)),
                ('personal_information_processing_accepted', models.BooleanField(default=False)),
                ('status', models.CharField(choices=[('submitted', 'Submitted'), ('under_review', 'Under review'), ('request_info', 'Information requested'), ('approved', 'Approved'), ('rejected', 'Rejected')], db_index=True, default='submitted', max_length=20)),
                ('ticket_url', models.URLField(blank=True)),
                ('archived', models.BooleanField(default=False)),
                ('version', models.PositiveIntegerField(default=1, help_text='Incremented on every update')),
                ('last_updated_by', models.CharField(blank=True, help_text="'ADMIN' or the id of the organizer who made the change", max_length=64)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('organizer', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='campaign_applications', to='people.organizer')),
            ],
            options={
                'verbose_name': 'Campaign Application',
                'verbose_name_plural': 'Campaign Applications',
                'ordering': ['created_at', 'id'],
                'indexes': [models.Index(fields=['organizer', 'created_at'], name='applications_organizer_idx')],
            },
        ),
        migrations.CreateModel(
            name='CampaignApplicationFile',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('storage_key', models.CharField(help_text='Object key in storage: campaign-applications/{app}/{uuid}', max_length=512, unique=True)),
                ('filename', models.CharField(help_text='Original filename as uploaded', max_length=255)),
                ('mime_type', models.CharField(help_text='MIME type declared by the uploader', max_length=255)),
                ('size_bytes', models.BigIntegerField(help_text='File size in bytes')),
                ('checksum_sha256', models.CharField(help_text='SHA256 hash for integrity verification', max_length=64)),
                ('uploaded_at', models.DateTimeField(auto_now_add=True)),
                ('application', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='files', to='campaign_applications.campaignapplication')),
                ('uploaded_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='campaign_application_files', to='people.person')),
            ],
            options={
                'verbose_name': 'Campaign Application File',
                'verbose_name_plural': 'Campaign Application Files',
                'ordering': ['uploaded_at', 'id'],
            },
        ),
        migrations.CreateModel(
            name='CampaignApplicationChange',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('performed_by', models.CharField(help_text="'ADMIN' or the id of the organizer who made the change", max_length=64)),
                ('changed_fields', models.JSONField(default=list)),
                ('previous_status', models.CharField(max_length=20)),
                ('new_status', models.CharField(max_length=20)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('application', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='changes', to='campaign_applications.campaignapplication')),
            ],
            options={
                'verbose_name': 'Campaign Application Change',
                'verbose_name_plural': 'Campaign Application Changes',
                'ordering': ['created_at', 'id'],
            },
        ),
    ]
