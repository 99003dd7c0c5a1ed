from datetime import datetime
from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from axii.db.session import Base

class Device(Base):
    __tablename__ = "dispositivo"
    __table_args__ = (UniqueConstraint("owner_id", "ip", name="uq_dispositivo_owner_ip"),)

    id = Column(Integer, primary_key=True, index=True)
    owner_id = Column(Integer, ForeignKey("usuario.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String, nullable=False)
    ip = Column(String, nullable=False)
    type = Column(String, nullable=False)  # computador, projetor, iluminacao, ar_condicionado, outro
    room = Column(String, nullable=False, index=True)
    description = Column(String, nullable=False, default="")
    status = Column(String, nullable=False, default="offline")  # online, offline, manutencao
    is_active = Column(Boolean, nullable=False, default=True)  # Ligado/desligado
    last_seen = Column(DateTime, default=datetime.utcnow)

    owner = relationship("User", back_populates="devices")
