"""Lõi xử lý: thực thể, bộ giải mã phát hiện và các bước thị giác máy tính."""
