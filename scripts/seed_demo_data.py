from __future__ import annotations

import argparse
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path


def _bootstrap_import_path() -> None:
    # Allow running as: python scripts/seed_demo_data.py
    root = Path(__file__).resolve().parents[1]
    if str(root) not in sys.path:
        sys.path.insert(0, str(root))


_bootstrap_import_path()

from connectus.database import Base, SessionLocal, engine  # noqa: E402
from connectus.models import Application, Job, Payment, User  # noqa: E402
from connectus.utils.password_hash import hash_password  # noqa: E402


DEMO_PASSWORD = "password123"

DEMO_USERS = [
    {
        "name": "Vanitha",
        "email": "vanitha@example.com",
        "bio": "Full-stack developer with a focus on MERN stack. Passionate about building scalable applications.",
        "skills": ["React", "Node.js", "MongoDB", "Express"],
    },
    {
        "name": "Sai Kumar",
        "email": "saikumar@example.com",
        "bio": "Backend engineer specializing in Node.js and REST APIs. Experienced with blockchain and Web3.",
        "skills": ["Node.js", "Express", "JavaScript", "Web3", "Solana"],
    },
    {
        "name": "Laxmi",
        "email": "laxmi@example.com",
        "bio": "Frontend designer and developer. Skilled in UI/UX design with Tailwind CSS.",
        "skills": ["React", "Tailwind CSS", "UI/UX"],
    },
    {
        "name": "Paparao",
        "email": "paparao@example.com",
        "bio": "Software engineer with experience in cloud technologies and data structures.",
        "skills": ["JavaScript", "HTML", "CSS"],
    },
    {
        "name": "Kavitha",
        "email": "kavitha@example.com",
        "bio": "Junior developer exploring new technologies and frameworks. Eager to learn Web3.",
        "skills": ["React", "JavaScript"],
    },
]

# (poster email, title, description, skills, budget, salary)
DEMO_JOBS = [
    ("vanitha@example.com", "React Developer Needed",
     "Seeking a skilled React developer to build our new front-end.", ["React", "JavaScript"], "500", "70000"),
    ("saikumar@example.com", "Backend Node.js Engineer",
     "Looking for a backend engineer for a scalable API project.", ["Node.js", "Express", "MongoDB"], "1000", "85000"),
    ("laxmi@example.com", "UI/UX Designer",
     "Need a creative designer to work on our application interface.", ["UI/UX", "Tailwind CSS"], "750", "60000"),
    ("paparao@example.com", "Solana Web3 Developer",
     "Seeking a developer experienced with Solana and Web3.js.", ["Solana", "Web3"], "2000", "120000"),
    ("vanitha@example.com", "Full Stack Engineer",
     "A senior role for a full stack engineer with expertise in MERN stack.",
     ["React", "Node.js", "Express", "MongoDB"], "1500", "100000"),
    ("saikumar@example.com", "Junior Frontend Developer",
     "An entry-level role for a motivated developer to join our team.", ["HTML", "CSS", "JavaScript"], "300", "50000"),
    ("laxmi@example.com", "Senior React Developer",
     "Looking for a senior developer to lead our React projects.", ["React", "JavaScript", "Redux"], "1200", "95000"),
    ("paparao@example.com", "Express.js API Developer",
     "Seeking a developer with strong Express.js skills for a microservice.", ["Node.js", "Express", "API"], "800", "75000"),
    ("vanitha@example.com", "CSS & Tailwind Specialist",
     "A part-time role for a designer skilled in modern CSS frameworks.", ["Tailwind CSS", "CSS"], "400", "55000"),
    ("kavitha@example.com", "Blockchain Engineer",
     "A freelance opportunity for a blockchain engineer for a short-term project.", ["Solana", "Blockchain"], "3000", "130000"),
]


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Seed demo users and jobs into the ORM DB.")
    parser.add_argument("--truncate", action="store_true", help="Delete existing users, jobs and payments first")
    parser.add_argument("--deadline-days", type=int, default=30, help="Days until the seeded jobs close")
    args = parser.parse_args(argv)

    Base.metadata.create_all(bind=engine)

    with SessionLocal() as db:
        if args.truncate:
            # Children first: applications and payments reference jobs and users.
            for model in (Application, Payment, Job, User):
                db.query(model).delete()
            db.commit()

        # Seeded jobs bypass the payment gate; they have no payment rows.
        hashed = hash_password(DEMO_PASSWORD)
        users: dict[str, User] = {}
        for row in DEMO_USERS:
            user = db.query(User).filter(User.email == row["email"]).first()
            if user is None:
                user = User(password=hashed, **row)
                db.add(user)
            users[row["email"]] = user
        db.flush()

        deadline = datetime.now(timezone.utc) + timedelta(days=args.deadline_days)
        inserted = 0
        for email, title, description, skills, budget, salary in DEMO_JOBS:
            poster = users[email]
            exists = db.query(Job.id).filter(Job.user_id == poster.id, Job.title == title).first()
            if exists:
                continue
            db.add(
                Job(
                    user_id=poster.id,
                    title=title,
                    description=description,
                    skills=skills,
                    budget=budget,
                    salary=salary,
                    deadline=deadline,
                )
            )
            inserted += 1
        db.commit()

    print(f"users={len(users)} jobs_inserted={inserted} password={DEMO_PASSWORD}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
