from __future__ import annotations

import logging
import uuid
from typing import Iterable
from urllib.parse import quote

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from endpoints.document_errors import NOT_FOUND, RESERVED_FIELD_ERRORS
from persistence.document_state import Document
from persistence.interfaces import DocumentStore

router = APIRouter(tags=["documents"])
logger = logging.getLogger(__name__)

DEFAULT_RANDOM_ATTRIBUTE_KEY = "dummy-data"
FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


def first_values(parameters: Iterable[tuple[str, str]]) -> dict[str, str]:
    """
    Collapse multi-valued parameters to the first value seen for each key.
    """
    merged: dict[str, str] = {}
    for key, value in parameters:
        merged.setdefault(key, value)
    return merged


class DocumentResource:
    """
    HTTP contract for documents on top of a DocumentStore.

    Holds no state besides the injected store, so one instance serves every request.
    """

    def __init__(
        self,
        store: DocumentStore,
        *,
        random_attribute_key: str = DEFAULT_RANDOM_ATTRIBUTE_KEY,
        base_url: str = "",
    ) -> None:
        self._store = store
        self._random_attribute_key = random_attribute_key
        self._base_url = base_url.rstrip("/")

    def location_for(self, document_id: str) -> str:
        return f"{self._base_url}/documents/{quote(document_id, safe='')}"

    def get_document(self, document_id: str) -> Response:
        logger.info("GET DOCUMENT %s: requested", document_id)
        document = self._store.get(document_id)
        if document is None:
            logger.info("GET DOCUMENT %s: not found", document_id)
            return JSONResponse(NOT_FOUND.to_json_doc(), status_code=404)

        logger.info("GET DOCUMENT %s: succeeded", document_id)
        return JSONResponse(document.to_json_doc(), status_code=200)

    def update_document_fields(
        self,
        document_id: str,
        parameters: Iterable[tuple[str, str]],
        ignored_keys: Iterable[str] = (),
    ) -> Response:
        updates = first_values(parameters)
        # Non-text parts are never merged but still count for the reserved-field check.
        keys = set(updates) | set(ignored_keys)
        logger.info("UPDATE DOCUMENT %s: requested", document_id)
        logger.debug("UPDATE DOCUMENT %s parameters: %s", document_id, updates)

        if not self._store.contains(document_id):
            logger.info("UPDATE DOCUMENT %s: not found", document_id)
            return JSONResponse(NOT_FOUND.to_json_doc(), status_code=404)

        for field, error in RESERVED_FIELD_ERRORS:
            if field in keys:
                logger.info("UPDATE DOCUMENT %s: rejected reserved field %s", document_id, field)
                return JSONResponse(error.to_json_doc(), status_code=403)

        if self._store.update_attributes(document_id, updates) is None:
            return JSONResponse(NOT_FOUND.to_json_doc(), status_code=404)

        logger.info("UPDATE DOCUMENT %s: succeeded (%d attributes)", document_id, len(updates))
        return Response(status_code=202)

    def put_document(self, request_body: bytes | str) -> Response:
        logger.info("PUT DOCUMENT: requested")
        try:
            document = Document.from_json_payload(request_body)
        except ValidationError as e:
            logger.warning("PUT DOCUMENT: failed to deserialize payload: %s", e)
            return Response(status_code=400)
        logger.debug("PUT DOCUMENT: %r", document)
        return self._upsert(document, "PUT DOCUMENT")

    def put_random_document(self) -> Response:
        logger.info("CREATE RANDOM DOCUMENT: requested")
        document = Document.new({self._random_attribute_key: str(uuid.uuid4())})
        logger.debug("CREATE RANDOM DOCUMENT: %r", document)
        return self._upsert(document, "CREATE RANDOM DOCUMENT")

    def _upsert(self, document: Document, action: str) -> Response:
        did_overwrite = self._store.put(document)
        logger.info("%s %s: succeeded (overwrite=%s)", action, document.id, did_overwrite)
        if did_overwrite:
            return Response(status_code=200)
        return Response(status_code=201, headers={"Location": self.location_for(document.id)})


def get_document_resource(request: Request) -> DocumentResource:
    return request.app.state.document_resource


async def _request_parameters(request: Request) -> tuple[list[tuple[str, str]], set[str]]:
    """
    Form fields first, then query-string pairs; the first value per key wins.

    Also returns the names of form parts that carry files instead of text.
    """
    parameters: list[tuple[str, str]] = []
    file_keys: set[str] = set()
    content_type = request.headers.get("content-type", "").split(";")[0].strip().lower()
    if content_type in FORM_CONTENT_TYPES:
        form = await request.form()
        for key, value in form.multi_items():
            if isinstance(value, str):
                parameters.append((key, value))
            else:
                file_keys.add(key)
    parameters.extend(request.query_params.multi_items())
    return parameters, file_keys


@router.get("/documents/{document_id:path}")
async def get_document(
    document_id: str,
    resource: DocumentResource = Depends(get_document_resource),
) -> Response:
    return resource.get_document(document_id)


@router.put("/documents/{document_id:path}")
async def update_document_fields(
    document_id: str,
    request: Request,
    resource: DocumentResource = Depends(get_document_resource),
) -> Response:
    parameters, file_keys = await _request_parameters(request)
    return resource.update_document_fields(document_id, parameters, ignored_keys=file_keys)


@router.put("/documents")
async def put_document(
    request: Request,
    resource: DocumentResource = Depends(get_document_resource),
) -> Response:
    return resource.put_document(await request.body())


@router.post("/documents-random")
async def put_random_document(
    resource: DocumentResource = Depends(get_document_resource),
) -> Response:
    return resource.put_random_document()
