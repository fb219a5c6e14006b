"""
Tests for paper assembly.
"""

import logging

import pytest

from generation.paper_assembler import assemble_paper
from generation.schemas import SelectionResult
from conftest import make_question


def make_selection(questions):
    return SelectionResult(questions=questions, scheme_id="C")


def test_projection_keeps_only_public_fields():
    q = make_question(1, 2, "3", question="Define a heap.", image_url="https://example.com/heap.png")
    paper = assemble_paper(make_selection([q]))

    assert paper.model_dump(by_alias=True)["questions"] == [
        {"question": "Define a heap.", "imageUrl": "https://example.com/heap.png", "btLevel": "3", "unit": 2}
    ]


def test_details_come_from_first_selected_question():
    questions = [
        make_question(5, 1, "2", subject="Operating Systems", subject_code="CS301", regulation="R20"),
        make_question(2, 2, "2", subject="Data Structures"),
    ]
    paper = assemble_paper(make_selection(questions))

    assert paper.model_dump(by_alias=True)["paperDetails"] == {
        "subject": "Operating Systems",
        "subjectCode": "CS301",
        "branch": "CSE",
        "regulation": "R20",
        "year": "2",
        "semester": "1",
    }


def test_mixed_metadata_is_logged(caplog):
    questions = [make_question(1, 1, "2", subject="A"), make_question(2, 1, "2", subject="B")]
    with caplog.at_level(logging.WARNING, logger="generation.pipeline"):
        assemble_paper(make_selection(questions))

    assert "subject" in caplog.text


def test_homogeneous_metadata_is_not_logged(caplog):
    questions = [make_question(1, 1, "2"), make_question(2, 3, "4")]
    with caplog.at_level(logging.WARNING, logger="generation.pipeline"):
        assemble_paper(make_selection(questions))

    assert caplog.text == ""


def test_empty_selection_rejected():
    with pytest.raises(ValueError):
        assemble_paper(make_selection([]))
