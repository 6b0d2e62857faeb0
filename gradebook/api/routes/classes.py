from fastapi import APIRouter, Depends, status

from gradebook.api.deps import get_actor, get_catalog_service, get_enrollment_service
from gradebook.schemas.school_class import (
    ClassCreate,
    ClassUpdate,
    ClassOut,
    ClassDetailOut,
    ClassResponse,
    EnrollRequest,
    EnrollResponse,
)
from gradebook.schemas.user import UserBrief, MessageResponse
from gradebook.services.catalog import CatalogService
from gradebook.services.enrollment import EnrollmentService
from gradebook.services.policy import Actor

router = APIRouter(prefix="/classes", tags=["classes"])


@router.post("", response_model=ClassResponse, status_code=status.HTTP_201_CREATED)
def create_class(
    payload: ClassCreate,
    actor: Actor = Depends(get_actor),
    catalog: CatalogService = Depends(get_catalog_service),
):
    school_class = catalog.create_class(actor, payload.name, payload.description)
    return ClassResponse(message="Class created successfully", school_class=ClassOut.model_validate(school_class))


@router.get("", response_model=list[ClassDetailOut])
def list_classes(
    actor: Actor = Depends(get_actor),
    catalog: CatalogService = Depends(get_catalog_service),
):
    return [ClassDetailOut.model_validate(c) for c in catalog.list_classes(actor)]


@router.get("/available-students", response_model=list[UserBrief])
def available_students(
    actor: Actor = Depends(get_actor),
    enrollment: EnrollmentService = Depends(get_enrollment_service),
):
    return [UserBrief.model_validate(s) for s in enrollment.available_students(actor)]


@router.get("/{class_id}", response_model=ClassDetailOut)
def get_class(
    class_id: int,
    actor: Actor = Depends(get_actor),
    catalog: CatalogService = Depends(get_catalog_service),
):
    return ClassDetailOut.model_validate(catalog.get_class(actor, class_id))


@router.put("/{class_id}", response_model=ClassResponse)
def update_class(
    class_id: int,
    payload: ClassUpdate,
    actor: Actor = Depends(get_actor),
    catalog: CatalogService = Depends(get_catalog_service),
):
    school_class = catalog.update_class(actor, class_id, payload.name, payload.description)
    return ClassResponse(message="Class updated successfully", school_class=ClassOut.model_validate(school_class))


@router.delete("/{class_id}", response_model=MessageResponse)
def delete_class(
    class_id: int,
    actor: Actor = Depends(get_actor),
    catalog: CatalogService = Depends(get_catalog_service),
):
    catalog.delete_class(actor, class_id)
    return MessageResponse(message="Class deleted successfully")


@router.post("/{class_id}/students", response_model=EnrollResponse)
def add_students(
    class_id: int,
    payload: EnrollRequest,
    actor: Actor = Depends(get_actor),
    enrollment: EnrollmentService = Depends(get_enrollment_service),
):
    enrollments = enrollment.add_students(actor, class_id, payload.student_ids)
    return EnrollResponse(
        message="Students added to class successfully",
        class_id=class_id,
        student_ids=[e.student_id for e in enrollments],
    )


@router.delete("/{class_id}/students/{student_id}", response_model=MessageResponse)
def remove_student(
    class_id: int,
    student_id: int,
    actor: Actor = Depends(get_actor),
    enrollment: EnrollmentService = Depends(get_enrollment_service),
):
    enrollment.remove_student(actor, class_id, student_id)
    return MessageResponse(message="Student removed from class successfully")
