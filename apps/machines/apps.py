from django.apps import AppConfig


class MachinesConfig(AppConfig):
    name = 'apps.machines'
    verbose_name = 'Distribution machines'
