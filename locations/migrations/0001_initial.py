from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Location',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True, verbose_name='created at')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='updated at')),
                ('name', models.CharField(max_length=150, verbose_name='name')),
                ('kind', models.CharField(choices=[('WAREHOUSE', 'Warehouse'), ('STORE', 'Store')], db_index=True, max_length=12, verbose_name='kind')),
                ('address', models.CharField(blank=True, max_length=500, verbose_name='address')),
            ],
            options={
                'verbose_name': 'location',
                'verbose_name_plural': 'locations',
                'ordering': ['kind', 'name'],
                'constraints': [
                    models.CheckConstraint(condition=models.Q(kind__in=['WAREHOUSE', 'STORE']), name='location_kind_valid'),
                ],
            },
        ),
    ]
