"""
Shared Kernel

Domain base classes, the DateRange value object, the error taxonomy and
the unit of work used by every app of the reservation service.
"""
