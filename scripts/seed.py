import asyncio

from faker import Faker
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

# Make sure paths are correct for script execution
import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from campusmatch.db.session import AsyncSessionLocal
from campusmatch.models import Gender, InterestedIn, Match, MatchEntry, Message, Swipe, User, UserPhoto
from campusmatch.security import get_password_hash

faker = Faker("en_IN")

# Store credentials for easy output
seeded_user_credentials = {}
DEFAULT_PASSWORD = "Password123!"

# Campus centre; seeded users are scattered a few km around it
CAMPUS = {"latitude": 23.1545, "longitude": 72.8846, "city": "Gandhinagar"}

CAMPUS_USERS = [
    {
        "name": "Priya Sharma", "age": 21, "gender": Gender.FEMALE, "interested_in": InterestedIn.MALE,
        "bio": "Computer Science student at RRU. Love coding, music, and late-night study sessions!",
        "interests": ["programming", "music", "books", "gaming"], "occupation": "CS Student",
    },
    {
        "name": "Arjun Patel", "age": 22, "gender": Gender.MALE, "interested_in": InterestedIn.FEMALE,
        "bio": "Business major and cricket enthusiast. Looking for someone to explore campus life with!",
        "interests": ["cricket", "entrepreneurship", "movies", "travel"], "occupation": "Business Student",
    },
    {
        "name": "Ananya Singh", "age": 20, "gender": Gender.FEMALE, "interested_in": InterestedIn.BOTH,
        "bio": "Art student passionate about painting and photography. Let's create memories together!",
        "interests": ["art", "photography", "dance", "cafe hopping"], "occupation": "Fine Arts Student",
    },
    {
        "name": "Rohit Verma", "age": 23, "gender": Gender.MALE, "interested_in": InterestedIn.FEMALE,
        "bio": "Engineering student and fitness freak. Always up for campus events and sports!",
        "interests": ["engineering", "fitness", "football", "tech"], "occupation": "Engineering Student",
    },
    {
        "name": "Sneha Gupta", "age": 21, "gender": Gender.FEMALE, "interested_in": InterestedIn.MALE,
        "bio": "Psychology major who loves reading and deep conversations. Coffee dates anyone?",
        "interests": ["psychology", "reading", "coffee", "volunteering"], "occupation": "Psychology Student",
    },
    {
        "name": "Vikash Kumar", "age": 22, "gender": Gender.MALE, "interested_in": InterestedIn.FEMALE,
        "bio": "Medical student with a passion for helping others. Love music and campus festivals!",
        "interests": ["medicine", "music", "festivals", "volunteering"], "occupation": "Medical Student",
    },
]


async def clear_all_data(db: AsyncSession):
    """Clears all relevant data for a fresh seed, respecting deletion order."""
    print("--- Clearing All Existing Data ---")
    for model in (Message, MatchEntry, Match, Swipe, UserPhoto, User):
        await db.execute(model.__table__.delete())
    await db.commit()
    print("--- Finished Clearing Data ---")


def _email_for(name: str) -> str:
    return f"{name.lower().replace(' ', '.')}@campus.example.com"


async def create_user(db: AsyncSession, details: dict) -> User:
    email = details.get("email") or _email_for(details["name"])
    user = await db.scalar(select(User).filter(User.email == email))
    if user:
        print(f"User {email} already exists. Skipping creation.")
        seeded_user_credentials.setdefault(email, DEFAULT_PASSWORD)
        return user

    user = User(
        email=email,
        hashed_password=get_password_hash(DEFAULT_PASSWORD),
        name=details["name"],
        age=details["age"],
        gender=details["gender"],
        interested_in=details["interested_in"],
        bio=details["bio"],
        interests=details["interests"],
        occupation=details["occupation"],
        education="RRU",
        latitude=CAMPUS["latitude"] + faker.pyfloat(min_value=-0.03, max_value=0.03),
        longitude=CAMPUS["longitude"] + faker.pyfloat(min_value=-0.03, max_value=0.03),
        city=CAMPUS["city"],
    )
    user.photos.append(UserPhoto(url=f"/uploads/{email.split('@')[0]}.jpg", is_main=True, position=0))
    db.add(user)
    await db.flush()  # Get user.id

    print(f"Created User: {email} ({user.name}, {user.age})")
    seeded_user_credentials[email] = DEFAULT_PASSWORD
    return user


def random_campus_user() -> dict:
    gender = faker.random_element([Gender.MALE, Gender.FEMALE])
    name = faker.name_male() if gender == Gender.MALE else faker.name_female()
    return {
        "name": name[:50],
        "age": faker.random_int(min=18, max=26),
        "gender": gender,
        "interested_in": faker.random_element(list(InterestedIn)),
        "bio": faker.sentence(nb_words=12),
        "interests": faker.words(nb=4, unique=True),
        "occupation": f"{faker.random_element(['CS', 'Law', 'Design', 'Economics'])} Student",
    }


async def seed_data(extra_users: int = 10):
    async with AsyncSessionLocal() as db:
        print("\n--- Creating Campus Users ---")
        for details in CAMPUS_USERS:
            await create_user(db, details)

        print(f"\n--- Creating {extra_users} Random Users ---")
        for _ in range(extra_users):
            await create_user(db, random_campus_user())

        # Commit all pending changes
        await db.commit()
    print("\n--- Seeding Completed ---")

    print(f"\n--- Seeded User Credentials (Password for all: {DEFAULT_PASSWORD}) ---")
    for email in seeded_user_credentials:
        print(f"Email: {email}")


async def main():
    print("Starting database seed process...")
    if "--clear" in sys.argv:
        async with AsyncSessionLocal() as db:
            await clear_all_data(db)
    await seed_data()
    print("Database seed process finished.")

if __name__ == "__main__":
    # Apply migrations first: alembic upgrade head
    asyncio.run(main())
