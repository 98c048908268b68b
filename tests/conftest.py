import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from feedback_board.database import Base, get_db
from feedback_board.main import app
from feedback_board.models import ProductFeedback, User
from feedback_board.security import hash_password, issue_token

TEST_DATABASE_URL = "sqlite://"
engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

TEST_PASSWORD = "secret123"
TEST_PASSWORD_HASH = hash_password(TEST_PASSWORD)


@pytest.fixture(autouse=True)
def db_session() -> Session:
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def make_user(session: Session, name: str, email: str = None) -> User:
    user = User(
        name=name,
        email=email or f"{name.lower().replace(' ', '.')}@example.com",
        password_hash=TEST_PASSWORD_HASH,
    )
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


def make_feedback(
    session: Session, author: User, title: str = "Add dark mode", category: str = "feature"
) -> ProductFeedback:
    feedback = ProductFeedback(
        title=title,
        description="Please add a dark theme.",
        category=category,
        user_id=author.id,
    )
    session.add(feedback)
    session.commit()
    session.refresh(feedback)
    return feedback


def auth_headers(session: Session, user: User) -> dict:
    _, raw_token = issue_token(session, user)
    session.commit()
    return {"Authorization": f"Bearer {raw_token}"}
