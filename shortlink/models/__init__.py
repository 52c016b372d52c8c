from shortlink.models.link_record_model import LinkRecordModel


__all__ = ['LinkRecordModel']
