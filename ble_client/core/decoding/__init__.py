from .record_decoder import RECORD_SIZE, decode_record, encode_record

__all__ = ["RECORD_SIZE", "decode_record", "encode_record"]
