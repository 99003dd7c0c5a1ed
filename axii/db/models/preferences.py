from sqlalchemy import Column, Integer, Boolean, ForeignKey
from sqlalchemy.orm import relationship
from axii.db.session import Base

class UserPreferences(Base):
    __tablename__ = "preferencias_usuario"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("usuario.id", ondelete="CASCADE"), unique=True, nullable=False)

    dark_mode = Column(Boolean, nullable=False, default=False)

    # Notificações
    email_notifications = Column(Boolean, nullable=False, default=True)
    device_alerts = Column(Boolean, nullable=False, default=True)
    schedule_reminders = Column(Boolean, nullable=False, default=True)
    system_updates = Column(Boolean, nullable=False, default=False)

    # Privacidade
    public_profile = Column(Boolean, nullable=False, default=True)
    show_online_status = Column(Boolean, nullable=False, default=False)
    share_activity = Column(Boolean, nullable=False, default=False)

    user = relationship("User", back_populates="preferences")
