#!/usr/bin/env python3
"""
Create the database tables and, optionally, the first admin user.

    python create_db.py
    python create_db.py --admin-email admin@cycleparadise.lk --admin-password secret \
        --first-name Site --last-name Admin
"""

import argparse
import sys
from pathlib import Path

# Add the project root to Python path
sys.path.append(str(Path(__file__).parent))

from sqlalchemy.exc import SQLAlchemyError

from cycleparadise.core.config import settings
from cycleparadise.core.security import hash_password
from cycleparadise.db.session import Database
from cycleparadise.db.models import AdminUser, AdminRole, Booking, TourPackage


def create_admin(db, email: str, password: str, first_name: str, last_name: str, super_admin: bool = False) -> AdminUser:
	email = email.lower().strip()
	existing = db.query(AdminUser).filter(AdminUser.email == email).first()
	if existing:
		print(f"ℹ️  Admin {email} already exists, password updated")
		existing.password_hash = hash_password(password)
		db.commit()
		return existing

	admin = AdminUser(
		email=email,
		password_hash=hash_password(password),
		first_name=first_name,
		last_name=last_name,
		role=AdminRole.SUPER_ADMIN if super_admin else AdminRole.ADMIN,
	)
	db.add(admin)
	db.commit()
	print(f"✅ Admin {email} created")
	return admin


def create_database(args) -> bool:
	"""Create every table and report current row counts."""
	print(f"🚀 Creating database at {settings.database_url} ...")

	database = Database(settings.database_url)
	try:
		database.create_all()
		print("✅ Database and tables created!")

		db = database.session()
		try:
			if args.admin_email:
				if not args.admin_password:
					print("❌ --admin-password is required with --admin-email")
					return False
				create_admin(db, args.admin_email, args.admin_password, args.first_name, args.last_name, args.super_admin)

			print("📊 Current data:")
			print(f"   - Packages: {db.query(TourPackage).count()}")
			print(f"   - Bookings: {db.query(Booking).count()}")
			print(f"   - Admins: {db.query(AdminUser).count()}")
		finally:
			db.close()

	except SQLAlchemyError as e:
		print(f"❌ Error creating database: {e}")
		return False
	finally:
		database.dispose()

	return True


def parse_args(argv=None):
	parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
	parser.add_argument("--admin-email")
	parser.add_argument("--admin-password")
	parser.add_argument("--first-name", default="Admin")
	parser.add_argument("--last-name", default="User")
	parser.add_argument("--super-admin", action="store_true")
	return parser.parse_args(argv)


if __name__ == "__main__":
	sys.exit(0 if create_database(parse_args()) else 1)
