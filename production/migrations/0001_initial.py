from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='ProductionData',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True, verbose_name='created at')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='updated at')),
                ('date', models.DateField(unique=True, verbose_name='date')),
                ('purchased', models.PositiveIntegerField(default=0, verbose_name='purchased')),
                ('produced', models.PositiveIntegerField(default=0, verbose_name='produced')),
                ('sales', models.PositiveIntegerField(default=0, verbose_name='sales')),
                ('stock', models.IntegerField(default=0, verbose_name='stock')),
                ('remains', models.PositiveIntegerField(default=0, verbose_name='remains')),
            ],
            options={
                'verbose_name': 'production data',
                'verbose_name_plural': 'production data',
                'ordering': ['-date'],
            },
        ),
        migrations.CreateModel(
            name='Expenditure',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True, verbose_name='created at')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='updated at')),
                ('name', models.CharField(max_length=255, verbose_name='name')),
                ('amount', models.PositiveIntegerField(verbose_name='amount')),
                ('production', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='expenditures', to='production.productiondata', verbose_name='production record')),
            ],
            options={
                'verbose_name': 'expenditure',
                'verbose_name_plural': 'expenditures',
                'ordering': ['id'],
                'indexes': [models.Index(fields=['production', 'name'], name='expenditure_prod_name_idx')],
            },
        ),
    ]
