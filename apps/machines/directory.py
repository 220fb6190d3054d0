"""
Read-only lookups against the machine directory.

The marketplace calls into this module to validate posting targets;
nothing here writes to the machines table.
"""

import logging

from apps.common.exceptions import InvalidMachineError

from .models import Machine, MachineStatus

logger = logging.getLogger(__name__)


def get_machine(machine_id: str) -> Machine:
    """
    Look up a machine by ID.

    Raises:
        InvalidMachineError: If no machine has this ID
    """
    try:
        return Machine.objects.get(id=machine_id)
    except Machine.DoesNotExist:
        raise InvalidMachineError(f"Machine with ID {machine_id} not found")


def get_machine_for_posting(machine_id: str) -> Machine:
    """
    Look up a machine and check that it can receive an allocation.

    A machine accepts postings only when it is online and its stock
    level is below the configured full threshold.

    Raises:
        InvalidMachineError: If the machine is unknown, not online, or full
    """
    machine = get_machine(machine_id)

    if machine.status != MachineStatus.ONLINE:
        logger.warning("Rejected posting to %s machine %s", machine.status, machine.id)
        raise InvalidMachineError(
            f"Machine {machine.name} is {machine.get_status_display().lower()}"
        )

    if machine.is_full:
        logger.warning("Rejected posting to full machine %s", machine.id)
        raise InvalidMachineError(
            f"Machine {machine.name} is full ({machine.stock_level}% capacity)"
        )

    return machine


def available_machines():
    """Machines that currently accept postings, for target pickers."""
    return [
        machine for machine in Machine.objects.filter(status=MachineStatus.ONLINE)
        if not machine.is_full
    ]
