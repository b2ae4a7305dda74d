from portfolio.horizontal import decode_records, decode_sheet, decode_subjects, decode_vertical, pattern_groups


def test_subjects_skip_zero_progress():
    headers = ["admission_no", "math_progress", "math_grade", "sci_progress"]
    row = ["12345", "80", "A", "0"]
    assert decode_subjects(headers, row) == [{"subject": "Math", "progress": 80, "grade": "A"}]


def test_subject_names_are_displayed_with_spaces(subjects):
    out = decode_subjects(subjects[0], subjects[1])
    assert [s["subject"] for s in out] == ["Math", "Social science"]
    assert out[1] == {"subject": "Social science", "progress": 65.5, "grade": ""}


def test_subjects_without_row():
    assert decode_subjects(["math_progress"], None) == []


def test_subject_with_unparseable_progress_is_dropped():
    assert decode_subjects(["math_progress"], ["n/a"]) == []


def test_numbered_groups_have_no_upper_bound():
    headers = ["math_test1", "math_test12", "math_test12_date", "math_test"]
    groups = pattern_groups(headers, ["A", "B", "01-01-2024", "C"], "tests")
    assert [(g[0], g[1]) for g in groups] == [("math", "A"), ("math", "B")]
    assert groups[1][2]["date"] == "01-01-2024"


def test_activities_defaults(activities):
    out = decode_records("activities", activities[0], activities[1])
    assert out == [{
        "subject": "Math",
        "activity": "Quiz",
        "date": "01-04-2024",
        "description": "",
        "status": "complete",
    }]


def test_assignments_missing_status_is_pending():
    headers = ["roll_no", "eng_assignment1", "eng_assignment1_remarks"]
    out = decode_records("assignments", headers, ["1", "Essay", "Good"])
    assert out == [{
        "subject": "Eng",
        "name": "Essay",
        "assignedDate": "",
        "dueDate": "",
        "status": "pending",
        "remarks": "Good",
    }]


def test_tests_numeric_fields(tests_sheet):
    out = decode_records("tests", tests_sheet[0], tests_sheet[1])
    assert out[0] == {
        "subject": "Math",
        "name": "Unit 1",
        "date": "05-04-2024",
        "maxMarks": 50,
        "marksObtained": 45,
        "percentage": 90,
        "grade": "A+",
    }
    assert out[1]["maxMarks"] == 0
    assert out[1]["percentage"] == 0
    assert out[1]["grade"] == ""


def test_corrections(corrections):
    out = decode_records("corrections", corrections[0], corrections[1])
    assert out == [{
        "subject": "Eng",
        "copyType": "Notebook",
        "date": "03-04-2024",
        "improvements": "Handwriting",
        "remarks": "",
    }]


def test_multiword_subject_key():
    headers = ["social_science_correction1"]
    out = decode_records("corrections", headers, ["Workbook"])
    assert out[0]["subject"] == "Social science"


def test_vertical_rows_use_the_same_shapes():
    headers = ["Roll No", "Subject", "Test Name", "Date", "Max Marks", "Marks Obtained", "Percentage", "Grade"]
    rows = [
        ["21", "math", "Unit 1", "05-04-2024", "50", "40", "80", "A"],
        ["21", "sci", "", "06-04-2024", "50", "40", "80", "A"],
    ]
    out = decode_vertical("tests", headers, rows)
    assert out == [{
        "subject": "Math",
        "name": "Unit 1",
        "date": "05-04-2024",
        "maxMarks": 50,
        "marksObtained": 40,
        "percentage": 80,
        "grade": "A",
    }]


def test_vertical_subjects():
    headers = ["roll_no", "subject", "progress", "grade"]
    rows = [["21", "maths", "70", "B"], ["21", "art", "0", "C"]]
    assert decode_sheet("subjects", "vertical", headers, rows) == [
        {"subject": "Maths", "progress": 70, "grade": "B"}
    ]


def test_decode_sheet_horizontal_uses_first_row(subjects):
    assert len(decode_sheet("subjects", "horizontal", subjects[0], [subjects[1]])) == 2
    assert decode_sheet("subjects", "horizontal", subjects[0], []) == []
