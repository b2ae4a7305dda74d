"""
Response schemas

Pydantic models for the student-data endpoint. Field names are the wire
names the portfolio frontend reads (camelCase); `class` is exposed through
an alias.
"""
from __future__ import annotations
from typing import List, Optional, Union
from pydantic import BaseModel, ConfigDict, Field

Number = Union[int, float]


class StudentInfo(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str = ""
    class_: str = Field("", alias="class")
    admissionNo: str = ""
    rollNo: str = ""
    dob: str = ""
    contact: str = ""
    photoUrl: str = ""


class SubjectProgress(BaseModel):
    subject: str
    progress: Number
    grade: str = ""


class RecentTest(BaseModel):
    subject: str
    name: str
    date: str = ""
    marks: str = Field(..., description="marksObtained/maxMarks")
    percentage: Number = 0
    grade: str = ""


class Activity(BaseModel):
    subject: str
    activity: str
    date: str = ""
    description: str = ""
    status: str = ""


class Assignment(BaseModel):
    subject: str
    name: str
    assignedDate: str = ""
    dueDate: str = ""
    status: str = ""
    remarks: str = ""


class ScoredTest(BaseModel):
    subject: str
    name: str
    date: str = ""
    maxMarks: int = 0
    marksObtained: int = 0
    percentage: Number = 0
    grade: str = ""


class Correction(BaseModel):
    subject: str
    copyType: str
    date: str = ""
    improvements: str = ""
    remarks: str = ""


class AttendanceDay(BaseModel):
    dayOfMonth: int = Field(..., ge=1, le=31)
    date: str
    dayName: Optional[str] = None
    isSchoolDay: bool
    isHoliday: bool = False
    status: str = Field(..., description="present | absent | sunday | holiday | day-of-week | no-school")
    timeStatus: str = Field("", description="'' | on-time | late")


class AttendanceTotals(BaseModel):
    totalDays: int = 0
    daysPresent: int = 0
    daysAbsent: int = 0
    percentage: str = "0.0"


class AttendanceMonth(AttendanceTotals):
    month: int = Field(..., ge=0, le=11, description="0 = January")
    monthName: str = ""
    year: Optional[int] = None
    days: List[AttendanceDay] = []


class Attendance(BaseModel):
    yearToDate: AttendanceTotals
    months: List[AttendanceMonth] = []
    academicYear: str


class Summary(BaseModel):
    totalSubjects: int
    completedAssignments: int
    pendingAssignments: int
    attendancePercentage: str


class StudentProfile(BaseModel):
    studentInfo: StudentInfo
    subjectProgress: List[SubjectProgress] = []
    recentTests: List[RecentTest] = []
    subjectActivities: List[Activity] = []
    assignments: List[Assignment] = []
    tests: List[ScoredTest] = []
    corrections: List[Correction] = []
    attendance: Attendance
    summary: Summary


class Status(BaseModel):
    status: str
    message: str
    sheetsConfigured: bool
