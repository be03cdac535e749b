"""Phân loại lỗi của pipeline phát hiện và tinh chỉnh icon."""

from __future__ import annotations


class IconRefinerError(Exception):
    """Lớp gốc cho mọi lỗi do pipeline phát sinh."""


class InferenceError(IconRefinerError):
    """Mô hình không nạp được, suy luận thất bại hoặc trả về output sai dạng."""


class LabelTableError(IconRefinerError):
    """Bảng nhãn không đọc được hoặc có nội dung không hợp lệ."""


class LabelNotFoundError(LabelTableError):
    """Class id không có (hoặc có nhiều hơn một) mục tương ứng trong bảng nhãn."""

    def __init__(self, class_id: int, matches: int = 0) -> None:
        self.class_id = class_id
        self.matches = matches
        if matches:
            message = f"Class id {class_id} is ambiguous: {matches} label entries match"
        else:
            message = f"Class id {class_id} has no label entry"
        super().__init__(message)


class RefinementError(IconRefinerError):
    """Lỗi trong phạm vi một phát hiện; pipeline bỏ qua phát hiện đó và chạy tiếp."""


class EmptyRegionError(RefinementError):
    """Bounding box sau khi cắt theo biên ảnh không còn diện tích."""


class NoContourFoundError(RefinementError):
    """Mặt nạ không có điểm ảnh tiền cảnh nên không có đường viền nào."""
