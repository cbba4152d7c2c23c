from __future__ import annotations

import logging

from src.eduscan.eduscan.scanning.reference_set import ReferenceEntry, ReferenceSet
from tests.fakes import make_student


def test_teacher_pool_is_own_class_in_registration_order(roster, teacher_10a):
    reference = ReferenceSet.build(roster, teacher_10a)

    assert [s.id for s in reference.students] == ["s1", "s3"]
    assert reference.find("s2") is None
    assert reference.find("s3").name == "Chi Vo"


def test_admin_pool_is_everyone(roster, admin):
    assert len(ReferenceSet.build(roster, admin)) == 3


def test_references_carry_id_name_and_image(roster, admin):
    entries = ReferenceSet.build(roster, admin).references()

    assert entries[0] == ReferenceEntry(student_id="s1", name="An Nguyen", image="data:image/jpeg;base64,s1")


def test_limited_keeps_first_entries_and_warns(admin, caplog):
    students = [make_student(f"s{i}", f"Student {i}", "9-C") for i in range(1, 8)]
    reference = ReferenceSet.build(students, admin)

    with caplog.at_level(logging.WARNING):
        pool = reference.limited(5)

    assert [s.id for s in pool.students] == ["s1", "s2", "s3", "s4", "s5"]
    assert "truncated" in caplog.text


def test_limited_below_cap_is_silent(roster, admin, caplog):
    with caplog.at_level(logging.WARNING):
        pool = ReferenceSet.build(roster, admin).limited(5)

    assert len(pool) == 3
    assert caplog.text == ""
