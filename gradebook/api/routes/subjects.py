from fastapi import APIRouter, Depends, status

from gradebook.api.deps import get_actor, get_catalog_service
from gradebook.schemas.subject import (
    SubjectCreate,
    SubjectUpdate,
    SubjectOut,
    SubjectDetail,
    SubjectDetailResponse,
    SubjectResponse,
)
from gradebook.schemas.user import UserBrief, MessageResponse
from gradebook.services.catalog import CatalogService
from gradebook.services.policy import Actor

router = APIRouter(prefix="/subjects", tags=["subjects"])


@router.post("", response_model=SubjectResponse, status_code=status.HTTP_201_CREATED)
def create_subject(
    payload: SubjectCreate,
    actor: Actor = Depends(get_actor),
    catalog: CatalogService = Depends(get_catalog_service),
):
    subject = catalog.create_subject(actor, payload.class_id, payload.name, payload.description)
    return SubjectResponse(message="Subject created successfully", subject=SubjectOut.model_validate(subject))


@router.get("/class/{class_id}", response_model=list[SubjectOut])
def list_subjects(
    class_id: int,
    actor: Actor = Depends(get_actor),
    catalog: CatalogService = Depends(get_catalog_service),
):
    return [SubjectOut.model_validate(s) for s in catalog.list_subjects(actor, class_id)]


@router.get("/{subject_id}", response_model=SubjectDetailResponse, response_model_exclude_none=True)
def get_subject(
    subject_id: int,
    actor: Actor = Depends(get_actor),
    catalog: CatalogService = Depends(get_catalog_service),
):
    subject, students = catalog.get_subject(actor, subject_id)
    return SubjectDetailResponse(
        subject=SubjectDetail(
            id=subject.id,
            name=subject.name,
            description=subject.description,
            class_id=subject.class_id,
            class_name=subject.school_class.name,
        ),
        students=[UserBrief.model_validate(s) for s in students] if students is not None else None,
    )


@router.put("/{subject_id}", response_model=SubjectResponse)
def update_subject(
    subject_id: int,
    payload: SubjectUpdate,
    actor: Actor = Depends(get_actor),
    catalog: CatalogService = Depends(get_catalog_service),
):
    subject = catalog.update_subject(actor, subject_id, payload.name, payload.description)
    return SubjectResponse(message="Subject updated successfully", subject=SubjectOut.model_validate(subject))


@router.delete("/{subject_id}", response_model=MessageResponse)
def delete_subject(
    subject_id: int,
    actor: Actor = Depends(get_actor),
    catalog: CatalogService = Depends(get_catalog_service),
):
    catalog.delete_subject(actor, subject_id)
    return MessageResponse(message="Subject deleted successfully")
