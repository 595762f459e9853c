from flask import Blueprint, render_template, redirect, url_for, request, flash, current_app
from flask_login import login_user, login_required, logout_user, current_user

from sitecms.auth.forms import LoginForm
from sitecms.models import User


auth_bp = Blueprint('auth', __name__)


def _safe_next(target):
    # Only allow local paths as redirect targets
    if target and target.startswith('/') and not target.startswith('//'):
        return target
    return None


@auth_bp.route('/login', methods=['GET', 'POST'])
def login():
    if current_user.is_authenticated:
        return redirect(url_for('admin.dashboard'))

    form = LoginForm()
    if form.validate_on_submit():
        user = User.query.filter_by(email=form.email.data.strip().lower()).first()
        if not user or not user.check_password(form.password.data):
            current_app.logger.warning(f"Failed login for {form.email.data}")
            flash("Invalid email or password.", "error")
            return redirect(url_for('auth.login'))

        login_user(user)
        flash("Logged in successfully!", "success")
        return redirect(_safe_next(request.args.get('next')) or url_for('admin.dashboard'))

    return render_template('auth/login.html', form=form)


@auth_bp.route('/logout')
@login_required
def logout():
    logout_user()
    flash("You have been logged out.", "info")
    return redirect(url_for('public.index'))
