"""조직 카탈로그: GitHub 저장소와 Hugging Face Hub 항목을 통합 검색한다."""
