import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('catalog', '0001_initial'),
        ('locations', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='PoolRecord',
            fields=[
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True, verbose_name='created at')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='updated at')),
                ('product', models.OneToOneField(on_delete=django.db.models.deletion.PROTECT, primary_key=True, related_name='pool_record', serialize=False, to='catalog.product', verbose_name='product')),
                ('total_quantity', models.PositiveIntegerField(default=0, verbose_name='total quantity')),
                ('reserved_quantity', models.PositiveIntegerField(default=0, verbose_name='reserved quantity')),
                ('available_quantity', models.PositiveIntegerField(default=0, verbose_name='available quantity')),
                ('version', models.PositiveIntegerField(default=0, verbose_name='version')),
            ],
            options={
                'verbose_name': 'pool record',
                'verbose_name_plural': 'pool records',
                'db_table': 'pool_ledger',
                'ordering': ['product_id'],
                'permissions': [('move_stock', 'Can take in, distribute and transfer stock')],
                'constraints': [
                    models.CheckConstraint(
                        condition=models.Q(available_quantity=models.F('total_quantity') - models.F('reserved_quantity')),
                        name='pool_available_is_total_minus_reserved',
                    ),
                    models.CheckConstraint(
                        condition=models.Q(reserved_quantity__lte=models.F('total_quantity')),
                        name='pool_reserved_within_total',
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name='StockRecord',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True, verbose_name='created at')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='updated at')),
                ('quantity', models.PositiveIntegerField(default=0, verbose_name='quantity')),
                ('version', models.PositiveIntegerField(default=0, verbose_name='version')),
                ('location', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='stock_records', to='locations.location', verbose_name='location')),
                ('product', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='stock_records', to='catalog.product', verbose_name='product')),
            ],
            options={
                'verbose_name': 'stock record',
                'verbose_name_plural': 'stock records',
                'db_table': 'location_stock',
                'ordering': ['product_id', 'location_id'],
                'indexes': [
                    models.Index(fields=['location', 'product'], name='stock_location_product_idx'),
                ],
                'constraints': [
                    models.UniqueConstraint(fields=('product', 'location'), name='unique_stock_per_product_location'),
                ],
            },
        ),
        migrations.CreateModel(
            name='TransferRecord',
            fields=[
                ('transfer_id', models.BigAutoField(primary_key=True, serialize=False)),
                ('quantity', models.PositiveIntegerField(verbose_name='quantity')),
                ('note', models.CharField(blank=True, max_length=500, verbose_name='note')),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True, verbose_name='created at')),
                ('from_location', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='outgoing_transfers', to='locations.location', verbose_name='from location')),
                ('performed_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='+', to=settings.AUTH_USER_MODEL, verbose_name='performed by')),
                ('product', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='transfers', to='catalog.product', verbose_name='product')),
                ('to_location', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='incoming_transfers', to='locations.location', verbose_name='to location')),
            ],
            options={
                'verbose_name': 'transfer',
                'verbose_name_plural': 'transfers',
                'db_table': 'transfers',
                'ordering': ['-created_at', '-transfer_id'],
                'indexes': [
                    models.Index(fields=['product', 'created_at'], name='transfer_product_created_idx'),
                    models.Index(fields=['from_location', 'created_at'], name='transfer_from_created_idx'),
                    models.Index(fields=['to_location', 'created_at'], name='transfer_to_created_idx'),
                ],
                'constraints': [
                    models.CheckConstraint(condition=models.Q(quantity__gt=0), name='transfer_quantity_positive'),
                    models.CheckConstraint(condition=models.Q(('from_location', models.F('to_location')), _negated=True), name='transfer_locations_differ'),
                ],
            },
        ),
    ]
