from fastapi import APIRouter, Depends, HTTPException, Response
from typing import List

from fintrack.dependencies import get_storage
from fintrack.schemas import GlossaryTerm, GlossaryTermCreate, GlossaryTermUpdate
from fintrack.storage import StorageInterface

router = APIRouter()


@router.get("/", response_model=List[GlossaryTerm])
def list_glossary_terms(storage: StorageInterface = Depends(get_storage)):
    """List glossary terms alphabetically."""
    return storage.list_glossary_terms()


@router.get("/{term_id}", response_model=GlossaryTerm)
def get_glossary_term(term_id: str, storage: StorageInterface = Depends(get_storage)):
    term = storage.get_glossary_term(term_id)
    if not term:
        raise HTTPException(status_code=404, detail="Glossary term not found")
    return term


@router.post("/", response_model=GlossaryTerm, status_code=201)
def create_glossary_term(term: GlossaryTermCreate, storage: StorageInterface = Depends(get_storage)):
    return storage.create_glossary_term(term)


@router.api_route("/{term_id}", methods=["PUT", "PATCH"], response_model=GlossaryTerm)
def update_glossary_term(
    term_id: str,
    updates: GlossaryTermUpdate,
    storage: StorageInterface = Depends(get_storage),
):
    term = storage.update_glossary_term(term_id, updates)
    if not term:
        raise HTTPException(status_code=404, detail="Glossary term not found")
    return term


@router.delete("/{term_id}", status_code=204)
def delete_glossary_term(term_id: str, storage: StorageInterface = Depends(get_storage)):
    if not storage.delete_glossary_term(term_id):
        raise HTTPException(status_code=404, detail="Glossary term not found")
    return Response(status_code=204)
