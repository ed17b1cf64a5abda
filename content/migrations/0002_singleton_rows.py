from django.db import migrations

SINGLETON_ID = 1


def create_singleton_rows(apps, schema_editor):
    for model_name in ('ContactInfo', 'AboutInfo', 'ChefSpecial'):
        model = apps.get_model('content', model_name)
        model.objects.get_or_create(id=SINGLETON_ID)


def remove_singleton_rows(apps, schema_editor):
    for model_name in ('ContactInfo', 'AboutInfo', 'ChefSpecial'):
        apps.get_model('content', model_name).objects.filter(id=SINGLETON_ID).delete()


class Migration(migrations.Migration):

    dependencies = [
        ('content', '0001_initial'),
    ]

    operations = [
        migrations.RunPython(create_singleton_rows, remove_singleton_rows),
    ]
