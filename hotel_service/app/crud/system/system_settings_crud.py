from decimal import Decimal, ROUND_HALF_UP
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from ...models.system.system_settings import SystemSetting
from ...schemas.system.system_settings_schemas import SystemSettingsOut, SystemSettingsUpdate, TaxBreakdown

SETTINGS_ID = 1


def get_or_create_settings(db: Session) -> SystemSetting:
    setting = db.query(SystemSetting).filter(
        SystemSetting.id == SETTINGS_ID).first()
    if setting:
        return setting

    setting = SystemSetting(id=SETTINGS_ID)
    db.add(setting)
    try:
        db.commit()
    except IntegrityError:
        # Another request created the row first
        db.rollback()
        return db.query(SystemSetting).filter(SystemSetting.id == SETTINGS_ID).one()
    db.refresh(setting)
    return setting


def _settings_out(setting: SystemSetting) -> SystemSettingsOut:
    return SystemSettingsOut(
        room_rates=setting.room_rates or {},
        tax_settings={
            "service_tax": float(setting.service_tax),
            "gst": float(setting.gst),
            "city_tax": float(setting.city_tax),
        },
        policies=setting.policies or {},
        hotel_info=setting.hotel_info or {},
        notification_settings={
            "email_notifications": setting.email_notifications,
            "sms_notifications": setting.sms_notifications,
            "notify_on_booking": setting.notify_on_booking,
            "notify_on_check_in": setting.notify_on_check_in,
            "notify_on_check_out": setting.notify_on_check_out,
            "notify_on_maintenance": setting.notify_on_maintenance,
        },
        updated_at=setting.updated_at,
    )


def get_system_settings(db: Session) -> SystemSettingsOut:
    return _settings_out(get_or_create_settings(db))


def update_system_settings(db: Session, update_data: SystemSettingsUpdate) -> SystemSettingsOut:
    setting = get_or_create_settings(db)

    # -------- JSON sections are merged --------
    if update_data.room_rates is not None:
        setting.room_rates = {**(setting.room_rates or {}), **update_data.room_rates}
    if update_data.policies:
        setting.policies = {**(setting.policies or {}),
                            **update_data.policies.model_dump(exclude_unset=True)}
    if update_data.hotel_info:
        setting.hotel_info = {**(setting.hotel_info or {}),
                              **update_data.hotel_info.model_dump(exclude_unset=True)}

    # -------- Column sections --------
    if update_data.tax_settings:
        for field, value in update_data.tax_settings.model_dump(exclude_unset=True).items():
            setattr(setting, field, value)
    if update_data.notification_settings:
        for field, value in update_data.notification_settings.model_dump(exclude_unset=True).items():
            setattr(setting, field, value)

    db.commit()
    db.refresh(setting)
    return _settings_out(setting)


def _percent_of(amount: Decimal, rate) -> Decimal:
    return (amount * Decimal(str(rate)) / 100).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def suggested_taxes(db: Session, amount: float) -> TaxBreakdown:
    """Taxes on `amount` at the configured rates. Bills still take whatever taxes the caller sends."""
    setting = get_or_create_settings(db)
    base = Decimal(str(amount))
    service_tax = _percent_of(base, setting.service_tax)
    gst = _percent_of(base, setting.gst)
    city_tax = _percent_of(base, setting.city_tax)
    return TaxBreakdown(
        amount=float(base),
        service_tax=float(service_tax),
        gst=float(gst),
        city_tax=float(city_tax),
        total_taxes=float(service_tax + gst + city_tax),
    )
