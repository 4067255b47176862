from datetime import datetime, timedelta, timezone
from uuid import UUID
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from pydantic import BaseModel, EmailStr
from sqlalchemy.orm import Session
from sqlalchemy import select
from jose import JWTError, jwt
from typing import Optional
import bcrypt

from rotaplan.core.database import get_db
from rotaplan.core.config import settings
from rotaplan.models.employee import Employee
from rotaplan.models.manager import Manager
from rotaplan.services.audit import Actor

router = APIRouter()
security = HTTPBearer()

# JWT settings
ALGORITHM = "HS256"


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        return False


def get_password_hash(password: str) -> str:
    """Hash a password."""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None):
    """Create a JWT access token."""
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=settings.access_token_expire_minutes)
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=ALGORITHM)


def decode_token(token: str) -> dict:
    try:
        payload = jwt.decode(token, settings.jwt_secret_key, algorithms=[ALGORITHM])
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials",
        )
    if payload.get("sub") is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials",
        )
    return payload


def get_current_employee(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db),
) -> Employee:
    """Get the current authenticated employee from JWT token."""
    payload = decode_token(credentials.credentials)
    if payload.get("role", "employee") != "employee":
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="This endpoint requires an employee login")

    employee = db.get(Employee, UUID(payload["sub"]))
    if employee is None or not employee.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Employee not found or inactive",
        )
    return employee


def get_current_manager(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db),
) -> Manager:
    """Get the current authenticated manager from JWT token."""
    payload = decode_token(credentials.credentials)
    if payload.get("role") != "manager":
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="This endpoint requires manager role")

    manager = db.get(Manager, UUID(payload["sub"]))
    if manager is None or not manager.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Manager not found or inactive",
        )
    return manager


def get_actor(manager: Manager = Depends(get_current_manager)) -> Actor:
    """The manager behind the request, as the explicit actor for service calls."""
    return Actor.from_manager(manager)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user_id: str
    name: str
    email: str
    role: str


def _check_login(account, password: str) -> None:
    if not account:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
        )
    if not account.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Account is inactive",
        )
    # Check if a password has been set
    if not account.password_hash:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Password not set. Please contact your administrator.",
        )
    if not verify_password(password, account.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
        )


@router.post("/login", response_model=LoginResponse)
def login(req: LoginRequest, db: Session = Depends(get_db)):
    """Login endpoint for employees."""
    employee = db.execute(select(Employee).where(Employee.email == req.email.lower())).scalar_one_or_none()
    _check_login(employee, req.password)

    access_token = create_access_token(data={"sub": str(employee.employee_id), "role": "employee"})
    return LoginResponse(
        access_token=access_token,
        user_id=str(employee.employee_id),
        name=employee.name,
        email=employee.email,
        role="employee",
    )


@router.post("/manager/login", response_model=LoginResponse)
def manager_login(req: LoginRequest, db: Session = Depends(get_db)):
    """Login endpoint for managers (schedule administrators)."""
    manager = db.execute(select(Manager).where(Manager.email == req.email.lower())).scalar_one_or_none()
    _check_login(manager, req.password)

    access_token = create_access_token(data={"sub": str(manager.manager_id), "role": "manager"})
    return LoginResponse(
        access_token=access_token,
        user_id=str(manager.manager_id),
        name=manager.name,
        email=manager.email,
        role="manager",
    )


@router.get("/me")
def get_current_user_info(current_employee: Employee = Depends(get_current_employee)):
    """Get current authenticated employee info."""
    return {
        "employee_id": str(current_employee.employee_id),
        "name": current_employee.name,
        "email": current_employee.email,
        "main_location_id": str(current_employee.main_location_id) if current_employee.main_location_id else None,
    }
