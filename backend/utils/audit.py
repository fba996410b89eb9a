from sqlalchemy.orm import Session
from models.log import Log

def write_log(db: Session, *, actor, action, resource, status="SUCCESS", ip=None, meta=None):
    entry = Log(actor=actor, action=action, resource=resource, status=status, ip=ip, meta=meta or {})
    db.add(entry)
    db.commit()

def client_ip(request) -> str | None:
    if request is None or request.client is None:
        return None
    return request.client.host
