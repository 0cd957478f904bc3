# dependencies.py
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session
from connectus.database import get_db
from connectus.errors import ServiceError, as_http_exception
from connectus.models.user import User
from connectus.schemas.user import TokenData
from connectus.services.chat_service import ChatCompleter, get_chat_assistant
from connectus.services.payment_verifier import TransferVerifier, get_transfer_verifier
from connectus.services.skill_extractor import CandidateTermExtractor, get_term_extractor
from connectus.utils.jwt_handler import decode_access_token


oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/token")


def get_current_user(db: Session = Depends(get_db), token: str = Depends(oauth2_scheme)) -> User:
    if not token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    payload = decode_access_token(token)
    user_id = payload.get("sub")
    if user_id is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token payload")
    try:
        token_data = TokenData(user_id=int(user_id))
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token subject") from exc
    user = db.query(User).filter(User.id == token_data.user_id).first()
    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User not found")
    return user


def term_extractor(request: Request) -> CandidateTermExtractor:
    # Built once in the app lifespan; NLTK taggers are slow to load.
    extractor = getattr(request.app.state, "term_extractor", None)
    return extractor if extractor is not None else get_term_extractor()


def transfer_verifier() -> TransferVerifier:
    return get_transfer_verifier()


def chat_assistant() -> ChatCompleter:
    try:
        return get_chat_assistant()
    except ServiceError as exc:
        raise as_http_exception(exc) from exc
