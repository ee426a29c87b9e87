from fastapi import APIRouter, Depends, File, Form, Header, HTTPException, UploadFile
from fastapi.responses import PlainTextResponse
from sqlmodel import Session

from favzone import services
from favzone.api.schemas import AddIn, BonusIn, ModeIn, ModeOut, MoveIn, OrderIn, RecordPatch, SequenceOut, UsageOut
from favzone.config import settings
from favzone.core.sequence import RecordNotFound
from favzone.core.validation import is_image_upload, is_valid_machine
from favzone.db.base import get_session
from favzone.export import dumps, to_csv, to_json, to_text
from favzone.extraction.client import ExtractionClient
from favzone.extraction.errors import ExtractionConfigError, ExtractionFailed, ExtractionRateLimited

router = APIRouter()


def _auth(api_key_header: str | None = Header(default=None, alias="X-API-Key")):
    if settings.api_key and api_key_header != settings.api_key:
        raise HTTPException(status_code=401, detail="Invalid API key")

def _machine(machine: int) -> int:
    if not is_valid_machine(machine):
        raise HTTPException(400, detail="machine must be 1 or 2")
    return machine

def get_extraction_client() -> ExtractionClient:
    return ExtractionClient.from_settings(settings)


@router.get('/mode', response_model=ModeOut)
async def read_mode(session: Session = Depends(get_session)):
    return {'mode': services.get_mode(session)}

@router.put('/mode', response_model=ModeOut)
async def write_mode(data: ModeIn, session: Session = Depends(get_session), ok=Depends(_auth)):
    return {'mode': services.change_mode(session, data.mode)}

@router.get('/usage', response_model=UsageOut)
async def read_usage(session: Session = Depends(get_session)):
    return services.get_usage(session)


@router.get('/machines/{machine}/records', response_model=SequenceOut)
async def records(machine: int = Depends(_machine), session: Session = Depends(get_session)):
    return services.get_view(session, machine)

@router.post('/machines/{machine}/records', response_model=SequenceOut)
async def add(data: AddIn, machine: int = Depends(_machine), session: Session = Depends(get_session), ok=Depends(_auth)):
    return services.add_record(session, machine, data.position)

@router.patch('/machines/{machine}/records/{record_id}', response_model=SequenceOut)
async def update(record_id: str, data: RecordPatch, machine: int = Depends(_machine),
                 session: Session = Depends(get_session), ok=Depends(_auth)):
    fields = data.model_dump(exclude_unset=True)
    if fields.get('game_count') is None:
        fields.pop('game_count', None)
    if fields.get('is_separator') is None:
        fields.pop('is_separator', None)
    try:
        return services.update_record(session, machine, record_id, **fields)
    except RecordNotFound as e:
        raise HTTPException(404, detail=str(e))

@router.delete('/machines/{machine}/records/{record_id}', response_model=SequenceOut)
async def delete(record_id: str, machine: int = Depends(_machine), session: Session = Depends(get_session), ok=Depends(_auth)):
    try:
        return services.delete_record(session, machine, record_id)
    except RecordNotFound as e:
        raise HTTPException(404, detail=str(e))

@router.post('/machines/{machine}/records/{record_id}/bonus', response_model=SequenceOut)
async def bonus(record_id: str, data: BonusIn, machine: int = Depends(_machine),
                session: Session = Depends(get_session), ok=Depends(_auth)):
    try:
        return services.toggle_bonus(session, machine, record_id, data.bonus_type)
    except RecordNotFound as e:
        raise HTTPException(404, detail=str(e))

@router.post('/machines/{machine}/records/{record_id}/separator', response_model=SequenceOut)
async def separator(record_id: str, machine: int = Depends(_machine), session: Session = Depends(get_session), ok=Depends(_auth)):
    try:
        return services.toggle_separator(session, machine, record_id)
    except RecordNotFound as e:
        raise HTTPException(404, detail=str(e))

@router.post('/machines/{machine}/move', response_model=SequenceOut)
async def move(data: MoveIn, machine: int = Depends(_machine), session: Session = Depends(get_session), ok=Depends(_auth)):
    try:
        return services.move_record(session, machine, data.from_index, data.to_index)
    except IndexError as e:
        raise HTTPException(400, detail=str(e))

@router.put('/machines/{machine}/order', response_model=SequenceOut)
async def order(data: OrderIn, machine: int = Depends(_machine), session: Session = Depends(get_session), ok=Depends(_auth)):
    try:
        return services.reorder(session, machine, data.ids)
    except ValueError as e:
        raise HTTPException(400, detail=str(e))

@router.post('/machines/{machine}/reverse', response_model=SequenceOut)
async def reverse(machine: int = Depends(_machine), session: Session = Depends(get_session), ok=Depends(_auth)):
    return services.reverse_records(session, machine)

@router.post('/machines/{machine}/clear', response_model=SequenceOut)
async def clear(machine: int = Depends(_machine), session: Session = Depends(get_session), ok=Depends(_auth)):
    return services.clear_records(session, machine)


@router.post('/machines/{machine}/image', response_model=SequenceOut)
def image(image: UploadFile = File(...), how: str = Form("append"), machine: int = Depends(_machine),
          session: Session = Depends(get_session), client: ExtractionClient = Depends(get_extraction_client),
          ok=Depends(_auth)):
    if how not in ("append", "overwrite"):
        raise HTTPException(400, detail="how must be append or overwrite")
    if not is_image_upload(image.content_type):
        raise HTTPException(400, detail="upload must be an image")
    data = image.file.read()
    try:
        return services.import_image(session, machine, data, image.filename or "image.png",
                                     image.content_type, how=how, client=client)
    except services.UsageLimitReached as e:
        raise HTTPException(429, detail=str(e))
    except services.NoRecordsDetected as e:
        raise HTTPException(422, detail=str(e))
    except ExtractionConfigError as e:
        raise HTTPException(503, detail=str(e))
    except ExtractionRateLimited as e:
        raise HTTPException(429, detail=str(e))
    except ExtractionFailed as e:
        raise HTTPException(502, detail=f"Failed to process image with AI: {e}")


@router.get('/machines/{machine}/export.csv')
async def export_csv(machine: int = Depends(_machine), session: Session = Depends(get_session)):
    view = services.get_view(session, machine)
    return PlainTextResponse(to_csv(view['records']), media_type="text/csv; charset=utf-8",
                             headers={"Content-Disposition": "attachment; filename=pachislot_data.csv"})

@router.get('/machines/{machine}/export.json')
async def export_json(machine: int = Depends(_machine), session: Session = Depends(get_session)):
    view = services.get_view(session, machine)
    return PlainTextResponse(dumps(to_json(view['records'])), media_type="application/json",
                             headers={"Content-Disposition": "attachment; filename=pachislot_data.json"})

@router.get('/machines/{machine}/export.txt')
async def export_txt(machine: int = Depends(_machine), session: Session = Depends(get_session)):
    view = services.get_view(session, machine)
    return PlainTextResponse(to_text(view['records'], view['mode']))
