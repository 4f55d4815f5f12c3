"""PostgreSQL exclusion constraint against overlapping bookings.

Second layer behind the row lock taken by the reservation manager. The
'[)' range matches DateRange.overlaps_with: a checkout day may be the
next guest's check-in day. Other database vendors skip this migration.
"""

from django.db import migrations

# Must stay equal to apps.bookings.models.OVERLAP_CONSTRAINT_NAME: the
# repository recognises overlap violations by this name.
CONSTRAINT_NAME = "booking_no_overlap"


def add_exclusion_constraint(apps, schema_editor):
    if schema_editor.connection.vendor != "postgresql":
        return
    schema_editor.execute("CREATE EXTENSION IF NOT EXISTS btree_gist")
    schema_editor.execute(
        f"""
        ALTER TABLE bookings_booking
        ADD CONSTRAINT {CONSTRAINT_NAME}
        EXCLUDE USING gist (
            spot_id WITH =,
            daterange(start_date, end_date, '[)') WITH &&
        )
        """
    )


def drop_exclusion_constraint(apps, schema_editor):
    if schema_editor.connection.vendor != "postgresql":
        return
    schema_editor.execute(f"ALTER TABLE bookings_booking DROP CONSTRAINT IF EXISTS {CONSTRAINT_NAME}")


class Migration(migrations.Migration):

    dependencies = [
        ("bookings", "0001_initial"),
    ]

    operations = [
        migrations.RunPython(add_exclusion_constraint, drop_exclusion_constraint),
    ]
