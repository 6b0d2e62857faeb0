from fastapi import APIRouter, Depends, status

from gradebook.api.deps import get_actor, get_grade_service
from gradebook.schemas.grade import (
    GradeAssignRequest,
    GradeUpdate,
    GradeOut,
    SubjectGradeOut,
    StudentGradeOut,
    GradesResponse,
    GradeResponse,
)
from gradebook.schemas.user import MessageResponse
from gradebook.services.grades import GradeService
from gradebook.services.policy import Actor

router = APIRouter(prefix="/grades", tags=["grades"])


@router.post("", response_model=GradesResponse, status_code=status.HTTP_201_CREATED)
def assign_grades(
    payload: GradeAssignRequest,
    actor: Actor = Depends(get_actor),
    ledger: GradeService = Depends(get_grade_service),
):
    grades = ledger.assign_grades(actor, payload.subject_id, payload.grades)
    return GradesResponse(
        message="Grades assigned successfully",
        grades=[GradeOut.model_validate(g) for g in grades],
    )


@router.get("/my-grades", response_model=list[StudentGradeOut])
def my_grades(
    actor: Actor = Depends(get_actor),
    ledger: GradeService = Depends(get_grade_service),
):
    return [StudentGradeOut.model_validate(g) for g in ledger.list_mine(actor)]


@router.get("/subject/{subject_id}", response_model=list[SubjectGradeOut])
def subject_grades(
    subject_id: int,
    actor: Actor = Depends(get_actor),
    ledger: GradeService = Depends(get_grade_service),
):
    return [SubjectGradeOut.model_validate(g) for g in ledger.list_for_subject(actor, subject_id)]


@router.get("/subject/{subject_id}/my-grade", response_model=list[StudentGradeOut])
def my_subject_grades(
    subject_id: int,
    actor: Actor = Depends(get_actor),
    ledger: GradeService = Depends(get_grade_service),
):
    return [StudentGradeOut.model_validate(g) for g in ledger.list_mine_for_subject(actor, subject_id)]


@router.get("/{grade_id}", response_model=GradeOut)
def get_grade(
    grade_id: int,
    actor: Actor = Depends(get_actor),
    ledger: GradeService = Depends(get_grade_service),
):
    return GradeOut.model_validate(ledger.get_grade(actor, grade_id))


@router.put("/{grade_id}", response_model=GradeResponse)
def update_grade(
    grade_id: int,
    payload: GradeUpdate,
    actor: Actor = Depends(get_actor),
    ledger: GradeService = Depends(get_grade_service),
):
    grade = ledger.update_grade(actor, grade_id, payload.grade, payload.assignment, payload.comments)
    return GradeResponse(message="Grade updated successfully", grade=GradeOut.model_validate(grade))


@router.delete("/{grade_id}", response_model=MessageResponse)
def delete_grade(
    grade_id: int,
    actor: Actor = Depends(get_actor),
    ledger: GradeService = Depends(get_grade_service),
):
    ledger.delete_grade(actor, grade_id)
    return MessageResponse(message="Grade deleted successfully")
