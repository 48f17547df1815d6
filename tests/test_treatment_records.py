"""
Treatment record contract tests, including the last-visit side effect.
"""

from datetime import datetime, timezone

import pytest

from tests.utils import local, make_appointment, make_record


class TestLastVisitSideEffect:
    """Creating a record moves the owning patient's last_visit."""

    def test_create_sets_last_visit(self, storage, patient):
        when = local(2024, 6, 1, 9, 30)

        make_record(storage, patient.id, when)

        assert storage.get_patient(patient.id).last_visit == when

    def test_older_record_still_overwrites(self, storage, patient):
        newer = local(2024, 6, 10, 9, 0)
        older = local(2024, 6, 1, 9, 0)

        make_record(storage, patient.id, newer)
        make_record(storage, patient.id, older)

        assert storage.get_patient(patient.id).last_visit == older

    def test_other_patients_untouched(self, storage, patient):
        other = storage.create_patient({"name": "Other", "phone": "2"})

        make_record(storage, patient.id, local(2024, 6, 1, 9, 0))

        assert storage.get_patient(other.id).last_visit is None

    def test_update_and_delete_do_not_move_last_visit(self, storage, patient):
        when = local(2024, 6, 1, 9, 0)
        record = make_record(storage, patient.id, when)

        storage.update_treatment_record(record.id, {"date": local(2024, 7, 1, 9, 0)})
        storage.delete_treatment_record(record.id)

        assert storage.get_patient(patient.id).last_visit == when

    def test_walkthrough(self, storage):
        jane = storage.create_patient({"name": "Jane Doe", "phone": "5551234567"})
        appt = make_appointment(storage, jane.id, "2024-06-01T09:00:00Z")
        record = storage.create_treatment_record({
            "patient_id": jane.id,
            "date": "2024-06-01T09:30:00Z",
            "treatment_type": "Checkup",
            "follow_up_needed": False,
        })

        assert jane.id == 1
        assert appt.id == 1
        assert appt.completed is False
        assert record.id == 1
        assert storage.get_patient(1).last_visit == datetime(2024, 6, 1, 9, 30, tzinfo=timezone.utc)


class TestRecordDefaults:

    def test_follow_up_defaults(self, storage, patient):
        record = make_record(storage, patient.id, local(2024, 6, 1))

        assert record.follow_up_needed is False
        assert record.follow_up_date is None
        assert record.notes is None

    def test_missing_date_is_rejected(self, storage, patient):
        with pytest.raises(ValueError, match="date"):
            storage.create_treatment_record({"patient_id": patient.id, "treatment_type": "X"})

        assert storage.get_patient(patient.id).last_visit is None


class TestRecordQueries:

    def test_by_patient_sorted_descending(self, storage, patient):
        early = make_record(storage, patient.id, local(2024, 6, 1))
        late = make_record(storage, patient.id, local(2024, 6, 3))
        middle = make_record(storage, patient.id, local(2024, 6, 2))

        result = storage.get_treatment_records_by_patient(patient.id)

        assert [r.id for r in result] == [late.id, middle.id, early.id]

    def test_order_is_inverse_of_appointments(self, storage, patient):
        dates = [local(2024, 6, d, 9, 0) for d in (2, 1, 3)]
        for when in dates:
            make_appointment(storage, patient.id, when)
            make_record(storage, patient.id, when)

        appt_dates = [a.date for a in storage.get_appointments_by_patient(patient.id)]
        record_dates = [r.date for r in storage.get_treatment_records_by_patient(patient.id)]

        assert appt_dates == sorted(dates)
        assert record_dates == sorted(dates, reverse=True)

    def test_all_records_sorted_descending(self, storage, patient):
        other = storage.create_patient({"name": "Other", "phone": "2"})
        a = make_record(storage, patient.id, local(2024, 1, 1))
        b = make_record(storage, other.id, local(2024, 3, 1))
        c = make_record(storage, patient.id, local(2024, 2, 1))

        assert [r.id for r in storage.get_all_treatment_records()] == [b.id, c.id, a.id]

    def test_search_type_and_notes(self, storage, patient):
        cleaning = make_record(storage, patient.id, local(2024, 1, 1), treatment_type="Teeth Cleaning")
        filling = make_record(storage, patient.id, local(2024, 2, 1), treatment_type="Filling",
                              notes="Patient asked about CLEANING schedule")
        make_record(storage, patient.id, local(2024, 3, 1), treatment_type="Extraction")

        result = storage.search_treatment_records("cleaning")

        assert [r.id for r in result] == [filling.id, cleaning.id]

    def test_search_empty_query_matches_all(self, storage, patient):
        make_record(storage, patient.id, local(2024, 1, 1))
        make_record(storage, patient.id, local(2024, 2, 1), notes="x")

        assert len(storage.search_treatment_records("")) == 2

    def test_get_update_delete_missing(self, storage):
        assert storage.get_treatment_record(1) is None
        assert storage.update_treatment_record(1, {"notes": "x"}) is None
        assert storage.delete_treatment_record(1) is False

    def test_partial_update(self, storage, patient):
        record = make_record(storage, patient.id, local(2024, 1, 1), notes="initial")

        updated = storage.update_treatment_record(record.id, {
            "follow_up_needed": True,
            "follow_up_date": local(2024, 2, 1, 10, 0),
        })

        assert updated.follow_up_needed is True
        assert updated.follow_up_date == local(2024, 2, 1, 10, 0)
        assert updated.notes == "initial"
        assert updated.treatment_type == "Checkup"
