import pytest


@pytest.fixture
def students():
    return [
        ["name", "class", "admission_no", "roll_no", "dob", "contact", "photo_url", "father_name"],
        ["Asha Rao", "7B", "12345", "21", "2012-06-01", "9876543210", "", "Ravi Rao"],
        ["Vikram Das", "7B", "12346", "22", "2012-02-11", "9876500000", "http://img/v.png"],
    ]


@pytest.fixture
def subjects():
    return [
        ["admission_no", "math_progress", "math_grade", "sci_progress", "sci_grade", "social_science_progress"],
        ["12345", "80", "A", "0", "C", "65.5"],
    ]


@pytest.fixture
def activities():
    return [
        ["admission_no", "math_activity1", "math_activity1_date", "math_activity1_status", "eng_activity2",
         "eng_activity2_description"],
        ["12345", "Quiz", "01-04-2024", "complete", "  ", "ignored"],
    ]


@pytest.fixture
def assignments():
    return [
        ["admission_no", "math_assignment1", "math_assignment1_due_date", "math_assignment1_status",
         "sci_assignment1", "sci_assignment1_status", "eng_assignment3"],
        ["12345", "Fractions", "10-04-2024", "complete", "Plants", "pending", "Essay"],
    ]


@pytest.fixture
def tests_sheet():
    return [
        ["admission_no", "math_test1", "math_test1_date", "math_test1_max_marks", "math_test1_marks_obtained",
         "math_test1_percentage", "math_test1_grade", "sci_test1", "sci_test1_date"],
        ["12345", "Unit 1", "05-04-2024", "50", "45", "90", "A+", "Unit 1", "20-05-2024"],
    ]


@pytest.fixture
def corrections():
    return [
        ["admission_no", "eng_correction1", "eng_correction1_date", "eng_correction1_improvements"],
        ["12345", "Notebook", "03-04-2024", "Handwriting"],
    ]


@pytest.fixture
def attendance():
    return [
        ["admission_no", "01/04/2024", "time", "02/04/2024", "03/04/2024", "05/04/2024", "07/04/2024", "Total"],
        ["12345", "P", "late", "P", "A", "1", "S", "4"],
    ]


@pytest.fixture
def tables(students, subjects, activities, assignments, tests_sheet, corrections, attendance):
    return [students, subjects, activities, assignments, tests_sheet, corrections, attendance]
