# create.py: bootstrap an administrator account
from getpass import getpass
from jobportal import create_app
from jobportal.extensions import db
from jobportal.models.user import User


def main():
    app = create_app()
    with app.app_context():
        db.create_all()
        email = input("Admin email: ").strip().lower()
        name = input("Full name: ").strip()
        phone = input("Phone (optional): ").strip()
        password = getpass("Password: ")

        if len(password) < 6:
            print("Password must be at least 6 characters.")
            return
        if User.query.filter_by(email=email).first():
            print("User with that email already exists.")
            return

        user = User(name=name, email=email, phone=phone or None, role="admin", is_verified=True)
        user.set_password(password)
        db.session.add(user)
        db.session.commit()
        print(f"Admin user {email} created successfully.")

if __name__ == "__main__":
    main()
