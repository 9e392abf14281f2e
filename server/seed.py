"""
Populate the database with sample NGOs, volunteers, events and registrations.

Usage: python seed.py
"""
import asyncio
import logging
from datetime import datetime

from database.DB import Database, object_id
from helpers.PasswordHashingStrategy import PasswordHashingStrategy

logger = logging.getLogger(__name__)

SAMPLE_NGOS = [
    {
        "name": "Green Earth Foundation",
        "email": "ngo1@example.com",
        "password": "password123",
        "role": "ngo",
        "phone": "+92-300-1234567",
        "organizationName": "Green Earth Foundation",
        "organizationDescription": "Dedicated to environmental conservation and sustainability initiatives across Pakistan."
    },
    {
        "name": "Hope for All Pakistan",
        "email": "ngo2@example.com",
        "password": "password123",
        "role": "ngo",
        "phone": "+92-321-9876543",
        "organizationName": "Hope for All Pakistan",
        "organizationDescription": "Providing food, education, and healthcare to underprivileged communities."
    },
]

SAMPLE_VOLUNTEERS = [
    {
        "name": "Ahmed Khan",
        "email": "volunteer1@example.com",
        "password": "password123",
        "role": "volunteer",
        "phone": "+92-333-1111111",
        "skills": ["Teaching", "First Aid", "Photography"],
        "availability": "weekends"
    },
    {
        "name": "Sara Ali",
        "email": "volunteer2@example.com",
        "password": "password123",
        "role": "volunteer",
        "phone": "+92-344-2222222",
        "skills": ["Cooking", "Event Management", "Social Media"],
        "availability": "flexible"
    },
]


def sample_events():
    return [
        {
            "title": "Beach Cleanup Drive - Clifton",
            "description": "Join us for a beach cleanup drive at Clifton Beach. We will collect trash and plastic waste. All cleaning materials will be provided.",
            "eventType": "beach-clean",
            "location": {"address": "Clifton Beach, Near Do Darya", "city": "Karachi"},
            "date": datetime(2025, 1, 15),
            "startTime": "07:00",
            "endTime": "11:00",
            "volunteersNeeded": 50,
            "requirements": "Wear comfortable clothes and shoes that can get wet. Sunscreen recommended.",
        },
        {
            "title": "Food Distribution - Ramadan Drive",
            "description": "Help us distribute iftar meals and ration packages to over 500 families in the local area.",
            "eventType": "food-drive",
            "location": {"address": "Saddar Town Community Center", "city": "Karachi"},
            "date": datetime(2025, 1, 20),
            "startTime": "15:00",
            "endTime": "19:00",
            "volunteersNeeded": 30,
            "requirements": "Basic physical fitness for loading and carrying food packages.",
        },
        {
            "title": "Tree Plantation Campaign",
            "description": "Be part of our annual tree plantation drive! We aim to plant 1000 trees in the city. Training will be provided.",
            "eventType": "tree-plantation",
            "location": {"address": "Model Colony Park", "city": "Lahore"},
            "date": datetime(2025, 2, 1),
            "startTime": "08:00",
            "endTime": "12:00",
            "volunteersNeeded": 100,
            "requirements": "Bring gardening gloves if you have them. Water will be provided.",
        },
        {
            "title": "Free Health Camp",
            "description": "Volunteer at our free health camp providing basic medical checkups and health awareness sessions.",
            "eventType": "health-camp",
            "location": {"address": "Government School Ground, Gulberg", "city": "Lahore"},
            "date": datetime(2025, 2, 10),
            "startTime": "09:00",
            "endTime": "16:00",
            "volunteersNeeded": 25,
            "requirements": "Medical students and healthcare professionals preferred but not required.",
        },
        {
            "title": "Education Workshop for Street Children",
            "description": "Help teach basic literacy and numeracy skills to street children. We provide all materials.",
            "eventType": "education",
            "location": {"address": "Community Hall, F-7", "city": "Islamabad"},
            "date": datetime(2025, 1, 25),
            "startTime": "10:00",
            "endTime": "14:00",
            "volunteersNeeded": 15,
            "requirements": "Basic teaching ability. Training provided.",
        },
    ]


async def seed(db: Database):
    hasher = PasswordHashingStrategy()
    now = datetime.utcnow()

    logger.info("Clearing existing data...")
    for collection in ("users", "events", "registrations"):
        await db.delete_many(collection, {})

    async def create_user(sample):
        user = dict(sample, password=hasher.hash(sample["password"]), createdAt=now)
        result = await db.add("users", user)
        return result["data"]

    ngos = [await create_user(ngo) for ngo in SAMPLE_NGOS]
    volunteers = [await create_user(volunteer) for volunteer in SAMPLE_VOLUNTEERS]
    logger.info("Created %d NGOs and %d volunteers", len(ngos), len(volunteers))

    events = []
    ngo_id = object_id(ngos[0]["_id"])
    for event in sample_events():
        event.update(status="upcoming", ngo=ngo_id, createdAt=now)
        result = await db.add("events", event)
        events.append(result["data"])
        logger.info("  Created Event: %s", event["title"])

    registrations = [
        (events[0], volunteers[0], "approved", "I am very excited to participate in this beach cleanup!"),
        (events[1], volunteers[1], "pending", "Looking forward to helping with food distribution."),
    ]
    for event, volunteer, status, message in registrations:
        await db.add("registrations", {
            "event": object_id(event["_id"]),
            "volunteer": object_id(volunteer["_id"]),
            "status": status,
            "message": message,
            "registeredAt": now,
            "updatedAt": now,
        })
        logger.info("  Created Registration: %s -> %s", volunteer["name"], event["title"])

    logger.info("Database seeded: NGO login ngo1@example.com / password123, "
                "volunteer login volunteer1@example.com / password123")
    return {"ngos": ngos, "volunteers": volunteers, "events": events}


async def main():
    db = Database()
    db.connect()
    try:
        await db.ensure_indexes()
        await seed(db)
    finally:
        db.close()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(message)s")
    asyncio.run(main())
