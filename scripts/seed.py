import argparse
import asyncio
import random

from faker import Faker
from sqlalchemy.ext.asyncio import AsyncSession

from app.crud import crud_like, crud_match
from app.db.session import AsyncSessionLocal
from app.models.like import Like
from app.models.match import Match
from app.models.user import User
from app.security import create_access_token

faker = Faker()

GENDERS = ["female", "male", "non-binary"]

async def clear_all_data(db: AsyncSession):
    """Clears likes, matches and users, respecting deletion order."""
    print("--- Clearing All Existing Test Data ---")
    await db.execute(Match.__table__.delete())
    await db.execute(Like.__table__.delete())
    await db.execute(User.__table__.delete())
    await db.commit()
    print("--- All data cleared. ---")

def fake_user() -> User:
    gender = random.choice(GENDERS)
    first_name = faker.first_name_female() if gender == "female" else faker.first_name_male()
    # Roughly a third of users accept any gender
    wanted = [] if random.random() < 0.33 else random.sample(GENDERS, k=random.randint(1, 2))
    return User(
        full_name=f"{first_name} {faker.last_name()}",
        username=faker.unique.user_name(),
        email=faker.unique.email(),
        gender=gender,
        birthdate=faker.date_of_birth(minimum_age=18, maximum_age=60),
        bio=faker.sentence(nb_words=12),
        avatar_url=f"https://i.pravatar.cc/300?u={faker.uuid4()}",
        preferences={"gender_preference": wanted},
    )

async def seed_data(user_count: int, like_ratio: float, clear: bool):
    async with AsyncSessionLocal() as db:
        if clear:
            await clear_all_data(db)

        print(f"\n--- Creating {user_count} users ---")
        users = [fake_user() for _ in range(user_count)]
        db.add_all(users)
        await db.commit()

        print("\n--- Creating likes ---")
        likes = 0
        matches = 0
        for liker in users:
            for target in users:
                if liker.id == target.id or random.random() > like_ratio:
                    continue
                if await crud_like.create_like(db, from_user_id=liker.id, to_user_id=target.id) is None:
                    continue
                likes += 1
                if await crud_like.get_like(db, from_user_id=target.id, to_user_id=liker.id):
                    await crud_match.create_match(db, user1_id=liker.id, user2_id=target.id)
                    matches += 1
        print(f"Created {likes} likes and {matches} matches")

    print("\n--- Seeded users (bearer tokens) ---")
    for user in users:
        print(f"{user.username} ({user.gender}, wants {user.preferences['gender_preference'] or 'anyone'}): {create_access_token(user.id)}")

async def main():
    parser = argparse.ArgumentParser(description="Seed demo users, likes and matches.")
    parser.add_argument("--users", type=int, default=20)
    parser.add_argument("--like-ratio", type=float, default=0.3)
    parser.add_argument("--keep", action="store_true", help="Do not clear existing data first.")
    args = parser.parse_args()

    print("Starting database seed process...")
    await seed_data(args.users, args.like_ratio, clear=not args.keep)
    print("Database seed process finished.")

if __name__ == "__main__":
    # Apply migrations first: alembic upgrade head
    asyncio.run(main())
