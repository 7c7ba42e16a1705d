from app import create_app
from app.extensions import db
from app.models import (
    User, Restaurant, CustomerVisit, FeedbackForm, FeedbackQuestion,
    FeedbackResponse, FeedbackAnswer
)
from flask_migrate import upgrade

app = create_app()

@app.shell_context_processor
def make_shell_context():
    return {'db': db, 'User': User, 'Restaurant': Restaurant, 'CustomerVisit': CustomerVisit,
            'FeedbackForm': FeedbackForm, 'FeedbackQuestion': FeedbackQuestion,
            'FeedbackResponse': FeedbackResponse, 'FeedbackAnswer': FeedbackAnswer}

if __name__ == '__main__':
    with app.app_context():
        # Run any pending migrations
        try:
            upgrade()
        except Exception as e:
            app.logger.error(f"Error running migrations: {e}")

    app.run(debug=app.config.get('DEBUG', False))
