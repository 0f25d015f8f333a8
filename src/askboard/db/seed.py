"""Demo data for local development."""

from typing import Dict

from sqlalchemy.ext.asyncio import AsyncSession

from askboard.core import get_logger
from askboard.services.qa_service import QAService
from askboard.services.tag_resolver import TagResolver
from askboard.services.transaction import transaction
from askboard.services.user_service import UserService

logger = get_logger(__name__)

DEMO_USERS = [
    {"user_id": "user_dummy_1", "email": "john.doe@example.com", "first_name": "John", "last_name": "Doe"},
    {"user_id": "user_dummy_2", "email": "jane.smith@example.com", "first_name": "Jane", "last_name": "Smith"},
    {"user_id": "user_dummy_3", "email": "bob.wilson@example.com", "first_name": "Bob", "last_name": "Wilson"},
]

DEMO_TAGS = ["javascript", "react", "typescript", "nodejs", "python", "css", "html", "database"]

# (question, answer)
DEMO_THREADS = [
    (
        {
            "title": "How do I implement authentication in React with Clerk?",
            "content": "<p>I'm building a React app and want to add user authentication. "
            "How do I protect routes and handle user sessions?</p>",
            "author_id": "user_dummy_1",
            "tags": ["javascript", "react"],
        },
        {
            "content": "<p>Wrap your app with ClerkProvider, use the SignIn and SignUp components "
            "and protect routes with the useAuth hook.</p>",
            "author_id": "user_dummy_2",
        },
    ),
    (
        {
            "title": "What's the best way to handle state management in a large React application?",
            "content": "<p>My React app is growing and state is hard to share across components. "
            "Redux, Zustand or the Context API?</p>",
            "author_id": "user_dummy_2",
            "tags": ["javascript", "react"],
        },
        {
            "content": "<p>Zustand is lightweight, has good TypeScript support and avoids the "
            "re-renders Context can cause.</p>",
            "author_id": "user_dummy_3",
        },
    ),
    (
        {
            "title": "How to deploy a Node.js app to production?",
            "content": "<p>What are the best practices for hosting, environment variables and "
            "security when deploying Node.js?</p>",
            "author_id": "user_dummy_3",
            "tags": ["nodejs"],
        },
        {
            "content": "<p>Keep secrets in environment variables, set up logging and health checks, "
            "and run under a process manager.</p>",
            "author_id": "user_dummy_1",
        },
    ),
    (
        {
            "title": "TypeScript vs JavaScript: When should I use TypeScript?",
            "content": "<p>I'm starting a new project. What are the benefits and downsides of "
            "TypeScript?</p>",
            "author_id": "user_dummy_1",
            "tags": ["javascript", "typescript"],
        },
        {
            "content": "<p>Compile-time errors, better editor support and easier refactoring. "
            "Start non-strict and tighten gradually.</p>",
            "author_id": "user_dummy_2",
        },
    ),
    (
        {
            "title": "How to optimize database queries for better performance?",
            "content": "<p>My PostgreSQL-backed app gets slower as the data grows. How do I find "
            "and fix slow queries?</p>",
            "author_id": "user_dummy_2",
            "tags": ["database"],
        },
        {
            "content": "<p>Index frequently filtered columns, select only what you need, paginate "
            "and read the plans with EXPLAIN.</p>",
            "author_id": "user_dummy_3",
        },
    ),
]


async def seed_demo_data(session: AsyncSession) -> Dict[str, int]:
    """
    Insert demo users, tags, questions and answers.

    Users and tags are upserted, so re-running only adds new question threads.

    Returns:
        Counts of what was written, keyed by kind
    """
    logger.info("Seeding demo data")

    users = UserService(session)
    for profile in DEMO_USERS:
        await users.sync_user(**profile)

    async with transaction(session, "seed_tags"):
        await TagResolver(session).resolve(DEMO_TAGS)

    qa = QAService(session)
    for question_data, answer_data in DEMO_THREADS:
        question = await qa.create_question(**question_data)
        await qa.create_answer(question_id=question.id, **answer_data)

    counts = {
        "users": len(DEMO_USERS),
        "tags": len(DEMO_TAGS),
        "questions": len(DEMO_THREADS),
        "answers": len(DEMO_THREADS),
    }
    logger.info("Demo data seeded", **counts)
    return counts
