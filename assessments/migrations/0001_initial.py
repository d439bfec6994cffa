import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models

import assessments.models.records


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='ESGRecord',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('company_info', models.JSONField(blank=True, default=dict)),
                ('environment', models.JSONField(blank=True, default=dict)),
                ('social', models.JSONField(blank=True, default=dict)),
                ('quality', models.JSONField(blank=True, default=dict)),
                ('governance', models.JSONField(blank=True, default=dict)),
                ('overall_score', models.JSONField(blank=True, default=assessments.models.records.default_overall_score)),
                ('status', models.CharField(choices=[('draft', 'Draft'), ('submitted', 'Submitted'), ('reviewed', 'Reviewed'), ('approved', 'Approved'), ('rejected', 'Rejected')], default='draft', max_length=20)),
                ('review_comments', models.TextField(blank=True)),
                ('status_changed_at', models.DateTimeField(blank=True, null=True)),
                ('version', models.PositiveIntegerField(default=0, help_text='Bumped on every committed write')),
                ('last_updated', models.DateTimeField(default=django.utils.timezone.now)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('company', models.ForeignKey(help_text='Owning company; the user itself when it has no parent company', on_delete=django.db.models.deletion.CASCADE, related_name='company_esg_records', to=settings.AUTH_USER_MODEL)),
                ('reviewed_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='reviewed_esg_records', to=settings.AUTH_USER_MODEL)),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='esg_records', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'ESG Record',
                'verbose_name_plural': 'ESG Records',
                'ordering': ['-last_updated'],
            },
        ),
        migrations.AddIndex(
            model_name='esgrecord',
            index=models.Index(fields=['status'], name='esg_record_status_idx'),
        ),
        migrations.AddIndex(
            model_name='esgrecord',
            index=models.Index(fields=['last_updated'], name='esg_record_updated_idx'),
        ),
        migrations.AddConstraint(
            model_name='esgrecord',
            constraint=models.UniqueConstraint(fields=('user', 'company'), name='unique_esg_record_owner'),
        ),
    ]
